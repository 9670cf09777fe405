"""
Patch listing and interactive patch selection
"""
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..errors import PatchNotFoundError
from ..ui.prompts import DANGER, MUTED
from ..utils.file_utils import list_patches
from .context import Context

BROWSE = "Browse for file..."


def list_patches_cmd(ctx: Context):
    """Print stored patches, newest first."""
    p = ctx.prompter
    p.title("📚 Available Patches")

    patches = list_patches(ctx.patches_dir)
    if not patches:
        print(f"  No patches found in {ctx.patches_dir}")
        return

    for patch in patches:
        mtime = datetime.fromtimestamp(patch.stat().st_mtime).strftime("%Y-%m-%d %H:%M:%S")
        if p.gum:
            print(f"  • {patch.name}")
            p.style(f"    {mtime}", color=MUTED)
        else:
            print(f"  {patch.name} ({mtime})")


def pick_patch(ctx: Context) -> Optional[str]:
    """
    Let the user choose a stored patch or type a path.
    Returns None when the picker is cancelled.
    """
    names = [patch.name for patch in list_patches(ctx.patches_dir)]
    if not names:
        ctx.prompter.style(f"No patches found in {ctx.patches_dir}", color=DANGER)
        raise PatchNotFoundError(str(ctx.patches_dir / "*.patch"))

    choice = ctx.prompter.choose(names + [BROWSE])
    if choice is None:
        return None
    if choice == BROWSE:
        return ctx.prompter.input("Path to patch file") or None
    return str(Path(ctx.patches_dir) / choice)
