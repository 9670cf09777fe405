"""
Interactive management of saved remote hosts
"""
from .. import config as _cfg
from ..ui.prompts import ACCENT
from ..utils.logging import warn
from .context import Context

ADD = "Add remote host"
LIST = "List configured hosts"
REMOVE = "Remove host"
BACK = "Back"


def _add(ctx: Context):
    p = ctx.prompter
    p.style("Add Remote Host", color=ACCENT)
    name = p.input("Host nickname (e.g., laptop, desktop)")
    if not name:
        return
    host = p.input("SSH host (e.g., user@hostname or ~/.ssh/config alias)")
    if not host:
        return
    path = p.input("Remote path", _cfg.DEFAULT_REMOTE_DIR)
    try:
        ctx.registry.add_or_replace(name, host, path or _cfg.DEFAULT_REMOTE_DIR)
    except ValueError as exc:
        warn(str(exc))
        return
    p.style(f"✓ Saved host '{name.strip()}'", color=ACCENT)


def _list(ctx: Context):
    ctx.prompter.style("Configured Hosts:", color=ACCENT)
    entries = ctx.registry.entries()
    if not entries:
        print("  No hosts configured")
    for entry in entries:
        print(f"  {entry.alias}: {entry.connection} → {entry.remote_dir or _cfg.DEFAULT_REMOTE_DIR}")


def _remove(ctx: Context):
    aliases = ctx.registry.list_aliases()
    if not aliases:
        print("No hosts configured")
        return
    alias = ctx.prompter.choose(aliases)
    if alias and ctx.registry.remove(alias):
        ctx.prompter.style(f"✓ Removed host '{alias}'", color=ACCENT)


def config_hosts(ctx: Context):
    """Add / list / remove loop until the user picks Back (or stdin ends)."""
    ctx.prompter.title("🔧 Git Continuity Configuration")
    actions = {ADD: _add, LIST: _list, REMOVE: _remove}
    while True:
        action = ctx.prompter.choose([ADD, LIST, REMOVE, BACK])
        if action is None or action == BACK:
            break
        print()
        actions[action](ctx)
        print()
