from __future__ import annotations

import hashlib
from pathlib import Path


class DataAccessError(Exception):
    pass


def resolve_under_data_root(*, data_root: Path, relpath: str) -> Path:
    """
    Resolve an ALTO source relpath under an explicit, resolved data_root.

    Callers pass data_root explicitly; nothing here reads the environment or
    assumes where sources live.
    """

    if relpath.strip() == "":
        raise DataAccessError("Expected a non-empty relative path under data_root")

    if relpath.startswith(("/", "\\")) or (":" in relpath and "\\" in relpath):
        # Absolute path / Windows drive patterns are not permitted as "relpath".
        raise DataAccessError(f"Expected a relative path under data_root, got: {relpath!r}")

    root = data_root.expanduser().resolve()
    candidate = (root / relpath).resolve()

    if not candidate.is_relative_to(root):
        raise DataAccessError(f"Path traversal or external reference detected: relpath={relpath!r}")

    return candidate


def sha256_bytes(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()

