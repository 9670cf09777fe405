"""
Import: envelope file → index and working tree
"""
from pathlib import Path
from typing import Optional

from ..core import patch_codec as codec
from ..errors import GitError, UsageError
from ..ui.prompts import ACCENT, MUTED, WARNING
from ..utils.file_utils import resolve_patch_file
from ..utils.logging import log, warn
from .context import Context
from .listing import pick_patch
from .preview import show_patch


def _resolve(ctx: Context, filename: Optional[str]) -> Optional[Path]:
    if not filename and ctx.caps.interactive:
        ctx.prompter.title("📥 Import Git Changes")
        filename = pick_patch(ctx)
        if filename is None:
            return None
    if not filename:
        raise UsageError("Please specify a patch file to import")
    return resolve_patch_file(filename, ctx.patches_dir)


def _apply_staged(ctx: Context, staged: bytes):
    """
    Staged changes go to the index and the matching files. When local edits
    make a file differ from its index entry, only the index is updated and
    the local edits stay in the working tree.
    """
    try:
        ctx.repo.apply_to_index(staged)
    except GitError as exc:
        if "does not match index" not in exc.stderr:
            raise
        warn("Local edits differ from the index; applying staged changes to the index only")
        ctx.repo.apply_to_index(staged, with_worktree=False)


def import_patch(ctx: Context, filename: Optional[str] = None, skip_preview: bool = False) -> bool:
    """
    Apply the STAGED section to the index (and matching files), then the
    UNSTAGED section to the working tree. Returns False when cancelled.
    GitError from git apply propagates untouched; nothing is rolled back.
    """
    p = ctx.prompter
    ctx.repo.require_work_tree()

    path = _resolve(ctx, filename)
    if path is None:
        print("Import cancelled")
        return False

    data = codec.read_envelope(path)
    codec.validate_layout(data)

    if not skip_preview:
        show_patch(ctx, data)
        print()
        if not p.confirm("Apply this patch?"):
            print("Import cancelled")
            return False

    print()
    if ctx.repo.has_uncommitted_changes():
        p.style("⚠ Warning: You have uncommitted changes", color=WARNING)
        if not p.confirm("Continue anyway?"):
            print("Import cancelled")
            return False

    staged = codec.extract_section(data, codec.STAGED)
    if staged:
        log("Applying staged changes...")
        _apply_staged(ctx, staged)
        p.style("✓ Staged changes applied", color=ACCENT)

    unstaged = codec.extract_section(data, codec.UNSTAGED)
    if unstaged:
        log("Applying unstaged changes...")
        ctx.repo.apply_to_worktree(unstaged)
        p.style("✓ Unstaged changes applied", color=ACCENT)

    print()
    p.style("✓ Patch applied successfully!", color=ACCENT, bold=True)
    print()
    p.style("Next steps:", color=MUTED)
    print("  - Review changes: git status")
    print("  - Continue working")
    print("  - Commit when ready: git commit")
    return True
