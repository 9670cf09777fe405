"""Utilities (logging, patch file helpers)"""
from .logging import log, vlog, warn, error, set_verbose
from .file_utils import default_patch_name, ensure_patch_suffix, list_patches, resolve_patch_file

__all__ = [
    "log", "vlog", "warn", "error", "set_verbose",
    "default_patch_name", "ensure_patch_suffix", "list_patches", "resolve_patch_file",
]
