#!/usr/bin/env python3
"""
These are the core enums used to convey information around bootstage.
"""

# Imports:
from __future__ import annotations

# ##-- stdlib imports
import enum
# ##-- end stdlib imports

class Stage_e(enum.Enum):
    """
      The escalating stages of the self-hosting pipeline.
      FINISHED and FAILED are only ever states of the stage machine.
    """

    BOOTSTRAP  = enum.auto()
    PRIMARY    = enum.auto()
    MAIN       = enum.auto()

    FINISHED   = enum.auto()
    FAILED     = enum.auto()

    @classmethod
    def pipeline(cls) -> tuple[Stage_e, ...]:
        return (cls.BOOTSTRAP, cls.PRIMARY, cls.MAIN)

class Drift_e(enum.Enum):
    """ Result of comparing a regenerated bootstrap template with the one in use """

    UNCHANGED  = enum.auto()
    CHANGED    = enum.auto()
