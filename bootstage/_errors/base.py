#!/usr/bin/env python3
"""



"""
# Import:
from __future__ import annotations

# ##-- stdlib imports
import logging as logmod
from typing import TYPE_CHECKING, Any

# ##-- end stdlib imports

if TYPE_CHECKING:
    from bootstage.enums import Stage_e

##-- logging
logging = logmod.getLogger(__name__)
##-- end logging

# Body:
class BootstageError(Exception):
    """
      The base class for all Bootstage Errors
      will try to % format the first argument with remaining args in str()

      location : the declaration the error originated from, when known.
      stage    : the pipeline stage running when it was raised, when known.
    """
    general_msg = "Non-Specific Bootstage Error:"

    def __init__(self, *args:Any, location:Any=None, stage:None|Stage_e=None):
        super().__init__(*args)
        self.location = location
        self.stage    = stage

    @property
    def stage_name(self) -> str:
        if self.stage is None:
            return ""
        return self.stage.name

    def __str__(self):
        try:
            msg = self.args[0] % self.args[1:]
        except TypeError:
            msg = str(self.args)
        except IndexError:
            msg = self.general_msg

        match self.location:
            case None:
                return msg
            case loc:
                return "{}: {}".format(loc, msg)

class BackendError(BootstageError):
    pass

class UserError(BootstageError):
    pass
