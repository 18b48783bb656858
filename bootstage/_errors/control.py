#!/usr/bin/env python3
"""
These are the bootstage pipeline errors
"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import logging as logmod
from typing import TYPE_CHECKING, Any

# ##-- end stdlib imports

from .base import BackendError

if TYPE_CHECKING:
    from bootstage.enums import Stage_e

##-- logging
logging = logmod.getLogger(__name__)
##-- end logging

class ControlError(BackendError):
    pass

class StageExecutionError(ControlError):
    """ A stage of the pipeline failed, usually because the engine did """
    general_msg = "Bootstage Stage Failure:"

    def __init__(self, msg:str, *args:Any, stage:None|Stage_e=None, **kwargs:Any):
        super().__init__(msg, *args, stage=stage, **kwargs)

class BootstrapConvergenceError(StageExecutionError):
    """ The bootstrap template kept changing after the permitted restarts """
    general_msg = "Bootstrap Did Not Converge:"
    pass
