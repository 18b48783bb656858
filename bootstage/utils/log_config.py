#!/usr/bin/env python3
"""
Logging setup for bootstage.

An initial stream handler is installed at WARNING,
then config tables replace it:

[logging.stream]   : the root logger
[logging.file]     : a file log, off by default
[logging.printer]  : user facing output, 'bootstage._printer'

"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import logging as logmod

# ##-- end stdlib imports

# ##-- 3rd party imports
from tomlguard import TomlGuard

# ##-- end 3rd party imports

# ##-- 1st party imports
from bootstage._interface import PRINTER_NAME
from bootstage._structs.logger_spec import LoggerSpec

# ##-- end 1st party imports

##-- logging
logging = logmod.getLogger(__name__)
##-- end logging

class LogConfig:
    """ Utility class to setup logging for bootstage """

    def __init__(self):
        self.stream  = LoggerSpec(name=LoggerSpec.RootName, level="WARNING", target="stderr", propagate=False)
        self.file    = LoggerSpec(name="bootstage", level="DEBUG", target="pass", propagate=True)
        self.printer = LoggerSpec(name=PRINTER_NAME, level="INFO", target="stdout", format="{message}", propagate=False)
        self.stream.apply()
        self.printer.apply()

    def setup(self, config:None|TomlGuard=None, *, verbose:bool=False) -> None:
        """ Apply the logging tables of config over the defaults """
        config = config if config is not None else TomlGuard({})
        self.stream  = self._spec(config, "stream",  self.stream)
        self.file    = self._spec(config, "file",    self.file)
        self.printer = self._spec(config, "printer", self.printer)

        self.stream.apply()
        self.printer.apply()
        if self.file.target != "pass":
            self.file.apply()

        if verbose:
            self.set_level("DEBUG")

    def set_level(self, level:int|str) -> None:
        logging.debug("Setting stream log level: %s", level)
        self.stream.set_level(level)

    def _spec(self, config:TomlGuard, key:str, current:LoggerSpec) -> LoggerSpec:
        match getattr(config.on_fail(None).logging, key)():
            case None:
                return current
            case dict() | TomlGuard() as table:
                return LoggerSpec.build(table, name=current.name)
            case x:
                raise TypeError("Logging config must be a table", key, x)
