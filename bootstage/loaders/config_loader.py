#!/usr/bin/env python3
"""
Locates and loads bootstage config.

Search order:
1. an explicit path (eg: from -c),
2. <src>/bootstage.toml,
3. the [tool.bootstage] table of <src>/pyproject.toml,
4. an empty config.

"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import logging as logmod
import pathlib as pl

# ##-- end stdlib imports

# ##-- 3rd party imports
import tomlguard
from tomlguard import TomlGuard

# ##-- end 3rd party imports

# ##-- 1st party imports
from bootstage._interface import BOOTSTAGE_TOML, PYPROJ_TOML, TOOL_PREFIX
from bootstage.errors import InvalidConfigError, MissingConfigError

# ##-- end 1st party imports

##-- logging
logging = logmod.getLogger(__name__)
##-- end logging

class BootstageConfigLoader:
    """ Loads the first config found for a source directory """

    def __init__(self, src_dir:None|pl.Path=None, *, explicit:None|pl.Path=None):
        self.src_dir   = pl.Path(src_dir or pl.Path.cwd())
        self.explicit  = None if explicit is None else pl.Path(explicit)
        self.source    : None|pl.Path = None

    def load(self) -> TomlGuard:
        match self.explicit:
            case pl.Path() as target if not target.is_file():
                raise MissingConfigError("Config file does not exist: %s", str(target))
            case pl.Path() as target:
                return self._load_file(target)
            case None:
                pass

        if (target:=self.src_dir / BOOTSTAGE_TOML).is_file():
            return self._load_file(target)

        if (target:=self.src_dir / PYPROJ_TOML).is_file():
            data  = self._read(target)
            match data.on_fail({}, dict|TomlGuard).tool.bootstage():
                case TomlGuard() as table if bool(table):
                    logging.info("Using config from: %s [%s]", target, TOOL_PREFIX)
                    self.source = target
                    return TomlGuard(table._table())
                case dict() as table if bool(table):
                    logging.info("Using config from: %s [%s]", target, TOOL_PREFIX)
                    self.source = target
                    return TomlGuard(table)
                case _:
                    pass

        logging.debug("No bootstage config found, using defaults")
        return TomlGuard({})

    def _load_file(self, target:pl.Path) -> TomlGuard:
        logging.info("Using config from: %s", target)
        self.source = target
        return self._read(target)

    def _read(self, target:pl.Path) -> TomlGuard:
        try:
            return tomlguard.read(target.read_text())
        except OSError as err:
            raise MissingConfigError("Failed to read config: %s", str(err)) from err
        except ValueError as err:
            raise InvalidConfigError("Invalid toml in %s: %s", str(target), str(err)) from err

def load_config(src_dir:None|pl.Path=None, *, explicit:None|pl.Path=None) -> TomlGuard:
    return BootstageConfigLoader(src_dir, explicit=explicit).load()
