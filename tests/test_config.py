"""
Tests for settings loading and patch file helpers.

Tests:
  - settings.yaml parsing and apply_settings validation
  - XDG directory resolution
  - patch naming, lookup and newest-first listing
"""
import os
import tempfile
import unittest
from datetime import datetime
from pathlib import Path
from unittest import mock

import git_continuity.config as cfg
from git_continuity.errors import PatchNotFoundError
from git_continuity.utils.file_utils import (
    default_patch_name, ensure_patch_suffix, list_patches, resolve_patch_file,
)

_SETTINGS_VARS = ("DEFAULT_REMOTE_DIR", "PREVIEW_STYLE", "PREVIEW_WIDTH",
                  "UI_MODE", "RENDERER", "PATCHES_DIR", "CONFIG_FILE")


class TestSettings(unittest.TestCase):
    """Tests for load_settings() / apply_settings() and the XDG paths."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.root = Path(self.tmpdir.name)
        self._saved = {name: getattr(cfg, name) for name in _SETTINGS_VARS}

    def tearDown(self):
        for name, value in self._saved.items():
            setattr(cfg, name, value)
        self.tmpdir.cleanup()

    def test_missing_settings_file(self):
        """A missing settings file loads as an empty mapping."""
        self.assertEqual(cfg.load_settings(self.root / "settings.yaml"), {})

    def test_load_and_apply(self):
        """apply_settings mutates the module-level defaults."""
        path = self.root / "settings.yaml"
        path.write_text(
            "default_remote_dir: /srv/patches/\n"
            "patches_dir: " + str(self.root / "store") + "\n"
            "preview_width: 80\n"
            "ui: plain\n"
            "renderer: BAT\n",
            encoding="utf-8",
        )
        cfg.apply_settings(cfg.load_settings(path))
        self.assertEqual(cfg.DEFAULT_REMOTE_DIR, "/srv/patches")
        self.assertEqual(cfg.get_patches_dir(), self.root / "store")
        self.assertEqual(cfg.PREVIEW_WIDTH, 80)
        self.assertEqual(cfg.UI_MODE, "plain")
        self.assertEqual(cfg.RENDERER, "bat")

    def test_invalid_values_rejected(self):
        """Unknown ui or renderer values raise ValueError."""
        with self.assertRaises(ValueError):
            cfg.apply_settings({"ui": "fancy"})
        with self.assertRaises(ValueError):
            cfg.apply_settings({"renderer": "less"})

    def test_non_mapping_rejected(self):
        """A settings file whose top level is not a mapping is rejected."""
        path = self.root / "settings.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")
        with self.assertRaises(ValueError):
            cfg.load_settings(path)

    def test_xdg_directories(self):
        """Config and data dirs follow XDG_CONFIG_HOME and XDG_DATA_HOME."""
        env = {"XDG_CONFIG_HOME": str(self.root / "c"), "XDG_DATA_HOME": str(self.root / "d")}
        with mock.patch.dict(os.environ, env):
            self.assertEqual(cfg.get_config_dir(), self.root / "c" / "git-continuity")
            self.assertEqual(cfg.get_config_file(), self.root / "c" / "git-continuity" / "config")
            self.assertEqual(cfg.get_patches_dir(),
                             self.root / "d" / "git-continuity" / "patches")
            cfg.ensure_dirs()
            self.assertTrue((self.root / "d" / "git-continuity" / "patches").is_dir())
            self.assertTrue((self.root / "c" / "git-continuity").is_dir())


class TestPatchFiles(unittest.TestCase):
    """Tests for patch naming, listing and resolution."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmpdir.name)

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_default_name(self):
        """Default patch names carry a sortable timestamp."""
        self.assertEqual(default_patch_name(datetime(2024, 1, 2, 3, 4, 5)),
                         "git-continuity-20240102-030405.patch")

    def test_suffix(self):
        """ensure_patch_suffix appends .patch only when missing."""
        self.assertEqual(ensure_patch_suffix("work"), "work.patch")
        self.assertEqual(ensure_patch_suffix("work.patch"), "work.patch")

    def test_list_newest_first(self):
        """list_patches orders by modification time, newest first."""
        for name in ["old.patch", "new.patch", "mid.patch"]:
            p = self.dir / name
            p.write_text("x", encoding="utf-8")
            stamp = {"old.patch": 1000, "mid.patch": 2000, "new.patch": 3000}[name]
            os.utime(p, (stamp, stamp))
        (self.dir / "notes.txt").write_text("ignored", encoding="utf-8")
        self.assertEqual([p.name for p in list_patches(self.dir)],
                         ["new.patch", "mid.patch", "old.patch"])

    def test_list_missing_dir(self):
        """A missing patch dir lists as empty."""
        self.assertEqual(list_patches(self.dir / "nope"), [])

    def test_resolve(self):
        """resolve_patch_file tries the given path, then the patch dir."""
        stored = self.dir / "work.patch"
        stored.write_text("x", encoding="utf-8")
        self.assertEqual(resolve_patch_file("work.patch", self.dir), stored)
        self.assertEqual(resolve_patch_file(str(stored), Path("/nonexistent")), stored)
        with self.assertRaises(PatchNotFoundError):
            resolve_patch_file("missing.patch", self.dir)


if __name__ == "__main__":
    unittest.main()
