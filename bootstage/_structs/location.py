#!/usr/bin/env python3
"""

"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import logging as logmod
import pathlib as pl
from dataclasses import dataclass

# ##-- end stdlib imports

##-- logging
logging = logmod.getLogger(__name__)
##-- end logging

@dataclass(frozen=True, order=True)
class SourceLocation:
    """ Where a declaration came from: the description file, and which entry in it.
      eg: 'src/Blueprints.toml:bootstrap_py_package[2]'
    """
    file  : pl.Path
    entry : None|str = None

    def __str__(self) -> str:
        match self.entry:
            case None:
                return str(self.file)
            case str() as entry:
                return "{}:{}".format(self.file, entry)
