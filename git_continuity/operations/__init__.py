"""Operations (export, import, preview, list, hosts, transfer)"""
from .context import Context, build_context
from .export import ExportResult, export_patch
from .import_patch import import_patch
from .preview import preview_patch, show_patch
from .listing import list_patches_cmd, pick_patch
from .hosts import config_hosts
from .transfer import send_patch, resolve_destination

__all__ = [
    "Context", "build_context",
    "ExportResult", "export_patch",
    "import_patch",
    "preview_patch", "show_patch",
    "list_patches_cmd", "pick_patch",
    "config_hosts",
    "send_patch", "resolve_destination",
]
