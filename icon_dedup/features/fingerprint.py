"""Content fingerprints for exact duplicate detection."""

from __future__ import annotations

import hashlib
from pathlib import Path

_CHUNK_SIZE = 64 * 1024


class FingerprintError(Exception):
    """Raised when an icon file cannot be read for hashing."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Cannot fingerprint {path}: {reason}")
        self.path = path


def file_fingerprint(path: str | Path) -> str:
    """Return the hex MD5 digest of the bytes stored at *path*."""
    target = Path(path)
    digest = hashlib.md5()
    try:
        with target.open("rb") as handle:
            for chunk in iter(lambda: handle.read(_CHUNK_SIZE), b""):
                digest.update(chunk)
    except OSError as exc:
        raise FingerprintError(target, exc.strerror or str(exc)) from exc
    return digest.hexdigest()
