"""
Interactive prompts: gum when available, plain stdin otherwise
"""
import subprocess
import sys
from typing import Callable, Optional, Sequence

from .capabilities import UiTier

ACCENT = "212"
MUTED = "242"
WARNING = "214"
DANGER = "196"


class Prompter:
    """confirm / input / choose plus styled output for one UI tier."""

    def __init__(self, tier: UiTier, input_fn: Callable[[str], str] = input, out=None):
        self.tier = tier
        self._input = input_fn
        self._out = out

    @property
    def out(self):
        return self._out or sys.stdout

    @property
    def gum(self) -> bool:
        return self.tier is UiTier.GUM

    def _echo(self, text: str = ""):
        print(text, file=self.out, flush=True)

    def _ask(self, prompt: str) -> Optional[str]:
        try:
            return self._input(prompt)
        except (EOFError, KeyboardInterrupt):
            self._echo()
            return None

    # ── output ──────────────────────────────────────────────────────────────

    def title(self, text: str):
        if self.gum:
            subprocess.run(["gum", "style", "--border", "rounded",
                            "--padding", "1 2", "--bold", text])
        else:
            self._echo(f"=== {text} ===")
        self._echo()

    def style(self, text: str, color: Optional[str] = None, bold: bool = False):
        if not self.gum:
            self._echo(text)
            return
        cmd = ["gum", "style"]
        if color:
            cmd += ["--foreground", color]
        if bold:
            cmd.append("--bold")
        subprocess.run(cmd + [text])

    def format(self, markdown: str):
        if self.gum:
            subprocess.run(["gum", "format"], input=markdown, text=True)
        else:
            self._echo(markdown)

    # ── questions ───────────────────────────────────────────────────────────

    def confirm(self, question: str) -> bool:
        if self.gum:
            return subprocess.run(["gum", "confirm", question]).returncode == 0
        reply = self._ask(f"{question} (y/N) ")
        return (reply or "").strip().lower() in ("y", "yes")

    def input(self, placeholder: str, value: str = "") -> str:
        if self.gum:
            proc = subprocess.run(
                ["gum", "input", "--placeholder", placeholder, "--value", value],
                stdout=subprocess.PIPE, text=True,
            )
            return proc.stdout.strip() if proc.returncode == 0 else ""
        hint = f" [{value}]" if value else ""
        reply = self._ask(f"{placeholder}{hint}: ")
        if reply is None:
            return ""
        return reply.strip() or value

    def choose(self, options: Sequence[str]) -> Optional[str]:
        """Pick one option; None when cancelled or nothing valid was chosen."""
        if not options:
            return None
        if self.gum:
            proc = subprocess.run(["gum", "choose", *options],
                                  stdout=subprocess.PIPE, text=True)
            choice = proc.stdout.strip()
            return choice if proc.returncode == 0 and choice else None

        for i, opt in enumerate(options, 1):
            self._echo(f"  {i}) {opt}")
        reply = self._ask("#? ")
        if reply is None:
            return None
        reply = reply.strip()
        if reply.isdigit() and 1 <= int(reply) <= len(options):
            return options[int(reply) - 1]
        if reply in options:
            return reply
        return None
