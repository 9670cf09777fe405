"""
Configuration constants for git-continuity
"""
import os
from pathlib import Path
from typing import Optional

import yaml

APP_NAME = "git-continuity"

# ══════════════════════════════════════════════════════════════════════════════
#  DEFAULTS  ── overridden by settings.yaml via apply_settings()
# ══════════════════════════════════════════════════════════════════════════════

# Remote directory used when a transfer destination is not a saved host
DEFAULT_REMOTE_DIR = "~/git-continuity-patches"

# Preview formatter options (glow)
PREVIEW_STYLE = "dark"
PREVIEW_WIDTH = 100

# "auto" picks gum / glow / bat when they are on PATH
UI_MODE = "auto"      # auto | gum | plain
RENDERER = "auto"     # auto | glow | bat | plain

# Overrides for the XDG-derived locations below
PATCHES_DIR: Optional[Path] = None
CONFIG_FILE: Optional[Path] = None

PATCH_SUFFIX = ".patch"
PATCH_NAME_FORMAT = "git-continuity-%Y%m%d-%H%M%S.patch"

_UI_MODES = ("auto", "gum", "plain")
_RENDERERS = ("auto", "glow", "bat", "plain")


# ══════════════════════════════════════════════════════════════════════════════
#  DIRECTORIES  ── $XDG_CONFIG_HOME/git-continuity, $XDG_DATA_HOME/git-continuity
# ══════════════════════════════════════════════════════════════════════════════

def get_config_dir() -> Path:
    """Return the per-user config directory for git-continuity."""
    xdg = os.environ.get("XDG_CONFIG_HOME", "")
    if xdg:
        return Path(xdg) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_data_dir() -> Path:
    """Return the per-user data directory for git-continuity."""
    xdg = os.environ.get("XDG_DATA_HOME", "")
    if xdg:
        return Path(xdg) / APP_NAME
    return Path.home() / ".local" / "share" / APP_NAME


def get_config_file() -> Path:
    """Return the hosts file (HOST_<alias>_HOST / HOST_<alias>_PATH lines)."""
    return CONFIG_FILE or get_config_dir() / "config"


def get_patches_dir() -> Path:
    return PATCHES_DIR or get_data_dir() / "patches"


def get_settings_file() -> Path:
    return get_config_dir() / "settings.yaml"


def ensure_dirs():
    """Create the config and patch directories on first run."""
    get_config_file().parent.mkdir(parents=True, exist_ok=True)
    get_patches_dir().mkdir(parents=True, exist_ok=True)


# ══════════════════════════════════════════════════════════════════════════════
#  SETTINGS FILE  ── settings.yaml
# ══════════════════════════════════════════════════════════════════════════════

def load_settings(path: Optional[Path] = None) -> dict:
    """
    Load settings.yaml from the config directory.
    A missing file yields an empty dict; a file that is not a mapping is an error.
    """
    cfg_path = path or get_settings_file()
    if not cfg_path.is_file():
        return {}
    with cfg_path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{cfg_path}: expected a mapping at the top level")
    return data


# ══════════════════════════════════════════════════════════════════════════════
#  APPLY SETTINGS  ── mutates module-level variables
# ══════════════════════════════════════════════════════════════════════════════

def apply_settings(settings: dict):
    """
    Apply a settings dict to the module-level config variables.
    Supports keys: default_remote_dir, patches_dir, config_file,
                   preview_style, preview_width, ui, renderer.
    """
    global DEFAULT_REMOTE_DIR, PREVIEW_STYLE, PREVIEW_WIDTH
    global UI_MODE, RENDERER, PATCHES_DIR, CONFIG_FILE

    if settings.get("default_remote_dir"):
        DEFAULT_REMOTE_DIR = str(settings["default_remote_dir"]).rstrip("/") or "/"
    if settings.get("patches_dir"):
        PATCHES_DIR = Path(str(settings["patches_dir"])).expanduser()
    if settings.get("config_file"):
        CONFIG_FILE = Path(str(settings["config_file"])).expanduser()
    if "preview_style" in settings:
        PREVIEW_STYLE = str(settings["preview_style"])
    if "preview_width" in settings:
        PREVIEW_WIDTH = int(settings["preview_width"])
    if "ui" in settings:
        mode = str(settings["ui"]).lower()
        if mode not in _UI_MODES:
            raise ValueError(f"ui must be one of {', '.join(_UI_MODES)} (got {mode!r})")
        UI_MODE = mode
    if "renderer" in settings:
        renderer = str(settings["renderer"]).lower()
        if renderer not in _RENDERERS:
            raise ValueError(
                f"renderer must be one of {', '.join(_RENDERERS)} (got {renderer!r})"
            )
        RENDERER = renderer
