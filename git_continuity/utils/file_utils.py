"""
Patch file utilities (naming, lookup, listing)
"""
from datetime import datetime
from pathlib import Path
from typing import Optional

from .. import config as _cfg
from ..errors import PatchNotFoundError


def default_patch_name(now: Optional[datetime] = None) -> str:
    """Timestamp-derived file name, one-second granularity."""
    return (now or datetime.now()).strftime(_cfg.PATCH_NAME_FORMAT)


def ensure_patch_suffix(name: str) -> str:
    if name.endswith(_cfg.PATCH_SUFFIX):
        return name
    return name + _cfg.PATCH_SUFFIX


def list_patches(patches_dir: Path) -> list[Path]:
    """Return *.patch files in patches_dir, newest modification time first."""
    if not patches_dir.is_dir():
        return []
    patches = [p for p in patches_dir.glob(f"*{_cfg.PATCH_SUFFIX}") if p.is_file()]
    return sorted(patches, key=lambda p: p.stat().st_mtime, reverse=True)


def resolve_patch_file(name: str, patches_dir: Path) -> Path:
    """
    Resolve a patch argument: an existing path as given, otherwise a file
    of that name inside patches_dir. Raises PatchNotFoundError.
    """
    candidate = Path(name).expanduser()
    if candidate.is_file():
        return candidate
    stored = patches_dir / name
    if stored.is_file():
        return stored
    raise PatchNotFoundError(name)
