"""YAML helpers for deal ledger vector files.

A vector file is a mapping with one `test_vectors` list. Files written here
carry a header naming the fixture they came from, so a stale vector can be
traced back and regenerated instead of hand-edited.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

HEADER = "# Generated by tools/fixtures_to_vectors.py (state digest v1). Do not edit.\n"


class VectorDumper(yaml.SafeDumper):
    pass


def _str_representer(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    # Multi-line descriptions stay readable as literal blocks.
    style = "|" if "\n" in data else None
    return dumper.represent_scalar("tag:yaml.org,2002:str", data, style=style)


VectorDumper.add_representer(str, _str_representer)


def dump_vectors(vectors: list[dict[str, Any]], source: str | None = None) -> str:
    body = yaml.dump(
        {"test_vectors": vectors}, Dumper=VectorDumper, sort_keys=False, width=4096
    )
    header = HEADER + (f"# source: {source}\n" if source else "")
    return header + body


def write_vectors(path: Path, vectors: list[dict[str, Any]], source: str | None = None) -> None:
    path.write_text(dump_vectors(vectors, source))


def load_vectors(path: Path | str) -> list[dict[str, Any]]:
    """Read the `test_vectors` list of a vector file.

    An empty file or one without the key yields no vectors. Any other shape
    is rejected so a truncated file cannot pass as an empty suite.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top level must be a mapping")
    vectors = data.get("test_vectors", [])
    if not isinstance(vectors, list):
        raise ValueError(f"{path}: test_vectors must be a list")
    return vectors
