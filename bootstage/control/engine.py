#!/usr/bin/env python3
"""
The graph execution engine, driven as a black box through sh.
"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import logging as logmod
import pathlib as pl

# ##-- end stdlib imports

# ##-- 3rd party imports
import sh

# ##-- end 3rd party imports

# ##-- 1st party imports
from bootstage._abstract.control import Engine_p
from bootstage._interface import PRINTER_NAME
from bootstage.errors import StageExecutionError

# ##-- end 1st party imports

# ##-- types
# isort: off
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable
    from tomlguard import TomlGuard

# isort: on
# ##-- end types

##-- logging
logging = logmod.getLogger(__name__)
printer = logmod.getLogger(PRINTER_NAME)
##-- end logging

class NinjaEngine(Engine_p):
    """
      Runs 'ninja -f manifest targets...' from the build directory.
      Output is streamed, line by line, to the printer.
    """

    def __init__(self, build_dir:pl.Path, *, command:str="ninja", args:None|list[str]=None):
        self.build_dir  = pl.Path(build_dir)
        self.command    = command
        self.args       = list(args or [])

    @staticmethod
    def from_config(build_dir:pl.Path, config:TomlGuard) -> NinjaEngine:
        return NinjaEngine(build_dir,
                           command=config.on_fail("ninja", str).engine.command(),
                           args=list(config.on_fail([], list).engine.args()))

    def run(self, manifest:pl.Path, *, targets:None|Iterable[str]=None) -> None:
        targets = list(targets or [])
        logging.info("Engine: %s -f %s %s", self.command, manifest, " ".join(targets))
        try:
            cmd = sh.Command(self.command)
            cmd(*self.args, "-f", str(manifest), *targets,
                _cwd=str(self.build_dir),
                _out=self._on_out,
                _err=self._on_err)
        except sh.CommandNotFound as err:
            raise StageExecutionError("Engine command not found: %s", err.args[0]) from err
        except sh.ErrorReturnCode as err:
            raise StageExecutionError("Engine '%s' exited with code: %s", err.full_cmd, err.exit_code) from err

    def _on_out(self, line:str) -> None:
        printer.info("%s", line.rstrip())

    def _on_err(self, line:str) -> None:
        printer.warning("%s", line.rstrip())
