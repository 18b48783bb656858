#!/usr/bin/env python3
"""
Compares a regenerated bootstrap template with the one in use.
"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import difflib
import logging as logmod

# ##-- end stdlib imports

# ##-- 1st party imports
from bootstage.enums import Drift_e

# ##-- end 1st party imports

##-- logging
logging = logmod.getLogger(__name__)
##-- end logging

def detect(new_template:str, committed_template:str) -> Drift_e:
    """ Exact text comparison """
    match new_template == committed_template:
        case True:
            return Drift_e.UNCHANGED
        case False:
            return Drift_e.CHANGED

def describe(new_template:str, committed_template:str, *, context:int=3) -> str:
    """ A unified diff from the committed template to the new one """
    diff = difflib.unified_diff(committed_template.splitlines(keepends=True),
                                new_template.splitlines(keepends=True),
                                fromfile="committed",
                                tofile="regenerated",
                                n=context)
    return "".join(diff)
