"""
Detection of optional terminal tools (gum, glow, bat)

Run once at start-up; the resulting tiers are passed to the prompter and
the preview renderer instead of checking PATH all over the code.
"""
import shutil
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from .. import config as _cfg
from ..utils.logging import vlog, warn


class UiTier(Enum):
    GUM = "gum"
    PLAIN = "plain"


class RenderTier(Enum):
    GLOW = "glow"
    BAT = "bat"
    PLAIN = "plain"


RENDER_CHAIN = [RenderTier.GLOW, RenderTier.BAT, RenderTier.PLAIN]


@dataclass(frozen=True)
class Capabilities:
    ui: UiTier
    render: RenderTier
    interactive: bool


def _pick_ui(which: Callable[[str], Optional[str]]) -> UiTier:
    if _cfg.UI_MODE == "plain":
        return UiTier.PLAIN
    if which("gum"):
        return UiTier.GUM
    if _cfg.UI_MODE == "gum":
        warn("ui is set to 'gum' but gum is not installed; using plain prompts")
    return UiTier.PLAIN


def _pick_render(which: Callable[[str], Optional[str]]) -> RenderTier:
    if _cfg.RENDERER == "plain":
        return RenderTier.PLAIN
    chain = RENDER_CHAIN
    if _cfg.RENDERER != "auto":
        chain = RENDER_CHAIN[RENDER_CHAIN.index(RenderTier(_cfg.RENDERER)):]
    for tier in chain:
        if tier is RenderTier.PLAIN or which(tier.value):
            return tier
    return RenderTier.PLAIN


def detect_capabilities(force_interactive: bool = False,
                        which: Callable[[str], Optional[str]] = shutil.which) -> Capabilities:
    ui = _pick_ui(which)
    render = _pick_render(which)
    caps = Capabilities(ui=ui, render=render,
                        interactive=force_interactive or ui is UiTier.GUM)
    vlog(f"[ui] prompts={ui.value} preview={render.value} interactive={caps.interactive}")
    return caps
