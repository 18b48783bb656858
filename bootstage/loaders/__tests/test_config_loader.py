#!/usr/bin/env python3
"""

"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import logging as logmod

# ##-- end stdlib imports

# ##-- 3rd party imports
import pytest
from tomlguard import TomlGuard

# ##-- end 3rd party imports

# ##-- 1st party imports
import bootstage.errors as berrs
from bootstage.loaders.config_loader import BootstageConfigLoader, load_config

# ##-- end 1st party imports

logging = logmod.root

class TestConfigLoader:

    def test_sanity(self):
        assert(True is not False)

    def test_empty(self, tmp_path):
        obj    = BootstageConfigLoader(tmp_path)
        result = obj.load()
        assert(isinstance(result, TomlGuard))
        assert(not bool(result))
        assert(obj.source is None)

    def test_bootstage_toml(self, tmp_path):
        (tmp_path / "bootstage.toml").write_text("[settings]\nload_workers = 2\n")
        obj    = BootstageConfigLoader(tmp_path)
        result = obj.load()
        assert(result.settings.load_workers == 2)
        assert(obj.source == tmp_path / "bootstage.toml")

    def test_pyproject(self, tmp_path):
        (tmp_path / "pyproject.toml").write_text("[project]\nname = 'x'\n\n[tool.bootstage.settings]\nload_workers = 3\n")
        result = load_config(tmp_path)
        assert(result.settings.load_workers == 3)

    def test_pyproject_without_table(self, tmp_path):
        (tmp_path / "pyproject.toml").write_text("[project]\nname = 'x'\n")
        result = load_config(tmp_path)
        assert(not bool(result))

    def test_bootstage_toml_preferred(self, tmp_path):
        (tmp_path / "bootstage.toml").write_text("[settings]\nload_workers = 2\n")
        (tmp_path / "pyproject.toml").write_text("[tool.bootstage.settings]\nload_workers = 3\n")
        assert(load_config(tmp_path).settings.load_workers == 2)

    def test_explicit_preferred(self, tmp_path):
        other = tmp_path / "other.toml"
        other.write_text("[settings]\nload_workers = 5\n")
        (tmp_path / "bootstage.toml").write_text("[settings]\nload_workers = 2\n")
        assert(load_config(tmp_path, explicit=other).settings.load_workers == 5)

    def test_explicit_missing(self, tmp_path):
        with pytest.raises(berrs.MissingConfigError):
            load_config(tmp_path, explicit=tmp_path / "missing.toml")

    def test_invalid_toml(self, tmp_path):
        (tmp_path / "bootstage.toml").write_text("[settings\nload_workers = \n")
        with pytest.raises(berrs.InvalidConfigError):
            load_config(tmp_path)
