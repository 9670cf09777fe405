"""Terminal UI (capability detection, prompts, diff previews)"""
from .capabilities import Capabilities, RenderTier, UiTier, detect_capabilities
from .prompts import Prompter
from .renderer import PreviewRenderer, colorize_diff

__all__ = [
    "Capabilities", "RenderTier", "UiTier", "detect_capabilities",
    "Prompter", "PreviewRenderer", "colorize_diff",
]
