"""
Patch previews: before export (working tree) and for an existing envelope
"""
from pathlib import Path
from typing import Optional

from ..core import patch_codec as codec
from ..core.patch_codec import ChangeSnapshot
from ..errors import EnvelopeError, GitError, UsageError
from ..ui.prompts import ACCENT, WARNING
from ..utils.file_utils import resolve_patch_file
from ..utils.logging import warn
from .context import Context

_LABELS = {codec.STAGED: "Staged", codec.UNSTAGED: "Unstaged"}


def preview_changes_before_export(ctx: Context, snapshot: ChangeSnapshot) -> bool:
    """Render what an export would contain. False when there is nothing to show."""
    if not snapshot.has_changes:
        return False
    if snapshot.has_staged:
        text = ctx.repo.staged_stat() + "\n\n" + snapshot.staged.decode("utf-8", errors="replace")
        ctx.renderer.render(text, "Staged Changes to Export")
    if snapshot.has_unstaged:
        text = ctx.repo.unstaged_stat() + "\n\n" + snapshot.unstaged.decode("utf-8", errors="replace")
        ctx.renderer.render(text, "Unstaged Changes to Export")
    return True


def _stat(ctx: Context, diff: bytes) -> str:
    try:
        return ctx.repo.apply_stat(diff)
    except GitError:
        return "Could not generate stats"


def show_patch(ctx: Context, data: bytes):
    """Metadata, change summary, per-section stats and optional full diffs."""
    p = ctx.prompter

    p.title("📋 Patch Information")
    fields = codec.metadata_fields(codec.decode_metadata(data))
    p.format("\n".join(f"{key}: {value or '-'}" for key, value in fields.items()))
    print()

    sections = {tag: codec.extract_section(data, tag) for tag in _LABELS}

    p.style("📊 Change Summary:", color=ACCENT)
    for tag, label in _LABELS.items():
        print(f"  {label} files: {codec.count_files(sections[tag])}")
    print()

    for tag, label in _LABELS.items():
        body = sections[tag]
        if body is None:
            continue
        p.style(f"📝 {label} Changes:", color=ACCENT)
        print(_stat(ctx, body))
        print()
        if p.confirm(f"View full {label.lower()} diff?"):
            ctx.renderer.render(body.decode("utf-8", errors="replace"),
                                f"{label} Changes Detail")

    untracked = codec.untracked_paths(data)
    if untracked:
        print()
        p.style("📄 Untracked Files (not included):", color=WARNING)
        for path in untracked:
            print(path)


def preview_patch(ctx: Context, filename: Optional[str]) -> Path:
    if not filename:
        raise UsageError("Usage: git-continuity preview <patch-file>")
    path = resolve_patch_file(filename, ctx.patches_dir)
    data = codec.read_envelope(path)
    try:
        codec.validate_layout(data)
    except EnvelopeError as exc:
        warn(f"{path.name}: {exc}")
    show_patch(ctx, data)
    return path
