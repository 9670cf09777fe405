"""
Export: working tree changes → envelope file (→ optional transfer)
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..core import patch_codec as codec
from ..core.patch_codec import ChangeSnapshot
from ..errors import NothingToExportError
from ..ui.prompts import ACCENT, MUTED, WARNING
from ..utils.file_utils import default_patch_name, ensure_patch_suffix
from ..utils.logging import vlog
from .context import Context
from .preview import preview_changes_before_export

CUSTOM_HOST = "Enter custom host..."


@dataclass
class ExportResult:
    path: Path
    snapshot: ChangeSnapshot
    # None when no transfer was attempted
    transferred: Optional[bool] = None


def _choose_filename(ctx: Context, filename: Optional[str]) -> str:
    if not filename and ctx.caps.interactive:
        print()
        ctx.prompter.title("📦 Export Git Changes")
        filename = ctx.prompter.input("Patch filename", default_patch_name())
    name = Path(filename or default_patch_name()).name
    return ensure_patch_suffix(name)


def _offer_transfer(ctx: Context, path: Path) -> Optional[bool]:
    p = ctx.prompter
    print()
    if not p.confirm("Transfer patch to remote host?"):
        return None
    print()
    hosts = ctx.registry.list_aliases()
    if hosts:
        choice = p.choose(hosts + [CUSTOM_HOST])
        if choice == CUSTOM_HOST:
            choice = p.input("SSH host (e.g., user@hostname)")
    else:
        p.style("No hosts configured. Enter SSH destination:", color=WARNING)
        choice = p.input("user@hostname")
    if not choice:
        return None
    print()
    return ctx.transfer(path, choice)


def export_patch(ctx: Context, filename: Optional[str] = None, skip_transfer: bool = False,
                 scp_dest: Optional[str] = None, skip_preview: bool = False) -> Optional[ExportResult]:
    """
    Snapshot the repository and write an envelope into the patch directory.
    Returns None when the user cancels.
    """
    p = ctx.prompter
    ctx.repo.require_work_tree()

    snapshot = ctx.repo.snapshot()
    if not snapshot.has_changes:
        raise NothingToExportError()

    if not skip_preview and preview_changes_before_export(ctx, snapshot):
        print()
        if not p.confirm("Proceed with export?"):
            print("Export cancelled")
            return None

    name = _choose_filename(ctx, filename)
    full_path = ctx.patches_dir / name
    if full_path.exists():
        if not p.confirm(f"{name} already exists. Overwrite?"):
            print("Export cancelled")
            return None
        full_path.unlink()

    p.style(f"Creating patch: {name}", color=ACCENT)
    data = codec.encode(snapshot, ctx.repo.metadata())
    ctx.patches_dir.mkdir(parents=True, exist_ok=True)
    codec.write_envelope(full_path, data)
    vlog(f"[export] wrote {len(data)} bytes, untracked listed: {len(snapshot.untracked)}")

    if p.gum:
        print()
        p.style("✓ Patch created successfully", color=ACCENT, bold=True)
        print()
        p.style(f"  📍 Location: {full_path}")
        if snapshot.has_staged:
            print("  ✓ Staged changes included")
        if snapshot.has_unstaged:
            print("  ✓ Unstaged changes included")
    else:
        print(f"✓ Patch created: {full_path}")

    result = ExportResult(full_path, snapshot)
    if scp_dest:
        print()
        result.transferred = ctx.transfer(full_path, scp_dest)
    elif not skip_transfer and ctx.caps.interactive:
        result.transferred = _offer_transfer(ctx, full_path)

    print()
    p.style("On the remote machine, run:", color=MUTED)
    p.style(f"  git-continuity import {name}", color=ACCENT)
    return result
