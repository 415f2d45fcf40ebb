"""Canonical hashing helpers for provenance markers and static fingerprints."""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any


def canonical_json_bytes(obj: Any) -> bytes:
    """Produce canonical JSON bytes with sorted keys and compact separators."""
    return json.dumps(
        obj, sort_keys=True, separators=(",", ":"), ensure_ascii=True
    ).encode("utf-8")


def sha256_hex(data: bytes) -> str:
    """Return the SHA-256 hex digest of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def file_digest(path: Path) -> str:
    """SHA-256 of a file's bytes, read in chunks."""
    h = hashlib.sha256()
    with path.open("rb") as fh:
        for chunk in iter(lambda: fh.read(65536), b""):
            h.update(chunk)
    return h.hexdigest()


def list_tree(root: Path) -> list[Path]:
    """Files under *root*, relative, in a stable (sorted POSIX) order."""
    if not root.is_dir():
        return []
    files = [p.relative_to(root) for p in root.rglob("*") if p.is_file()]
    return sorted(files, key=lambda p: p.as_posix())


def tree_digest(root: Path) -> str:
    """SHA-256 over every (relative path, file digest) pair under *root*.

    Independent of mtimes and traversal order, so identical trees always
    hash the same.
    """
    entries = [[rel.as_posix(), file_digest(root / rel)] for rel in list_tree(root)]
    return sha256_hex(canonical_json_bytes(entries))
