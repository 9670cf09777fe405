"""
Diff preview rendering

Three tiers, picked once by detect_capabilities():
  glow  → markdown rendering of a fenced diff block
  bat   → syntax-highlighted diff
  plain → ANSI colouring of +/-/@ lines, no external tool
A formatter that is missing or exits non-zero falls through to the next tier.
"""
import subprocess
from typing import Optional

from .. import config as _cfg
from ..utils.logging import vlog
from .capabilities import RENDER_CHAIN, RenderTier
from .prompts import Prompter

GREEN = "\x1b[32m"
RED = "\x1b[31m"
CYAN = "\x1b[36m"
RESET = "\x1b[0m"

_LINE_COLORS = {"+": GREEN, "-": RED, "@": CYAN}


def colorize_diff(text: str) -> str:
    lines = []
    for line in text.splitlines():
        color = _LINE_COLORS.get(line[:1])
        lines.append(f"{color}{line}{RESET}" if color else line)
    return "\n".join(lines)


class PreviewRenderer:
    def __init__(self, tier: RenderTier, prompter: Optional[Prompter] = None):
        self.tier = tier
        self.prompter = prompter

    def render(self, text: str, title: str = "Diff Preview"):
        if self.prompter:
            self.prompter.title(f"👁  {title}")
        for tier in RENDER_CHAIN[RENDER_CHAIN.index(self.tier):]:
            if self._render_with(tier, text):
                break
        print(flush=True)

    def _render_with(self, tier: RenderTier, text: str) -> bool:
        if tier is RenderTier.GLOW:
            markdown = f"```diff\n{text.rstrip()}\n```\n"
            return self._pipe(["glow", "--style", _cfg.PREVIEW_STYLE,
                               "--width", str(_cfg.PREVIEW_WIDTH), "-"], markdown)
        if tier is RenderTier.BAT:
            return self._pipe(["bat", "--language", "diff", "--style", "plain",
                               "--paging", "never", "--color", "always"], text)
        print(colorize_diff(text), flush=True)
        return True

    @staticmethod
    def _pipe(cmd: list, text: str) -> bool:
        try:
            proc = subprocess.run(cmd, input=text, text=True)
        except OSError as exc:
            vlog(f"[preview] {cmd[0]} unavailable: {exc}")
            return False
        if proc.returncode != 0:
            vlog(f"[preview] {cmd[0]} exited {proc.returncode}; falling back")
            return False
        return True
