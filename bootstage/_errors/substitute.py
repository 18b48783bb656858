#!/usr/bin/env python3
"""
Errors raised while filling placeholder tokens into a manifest template
"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import logging as logmod
from typing import Any

# ##-- end stdlib imports

from .base import UserError

##-- logging
logging = logmod.getLogger(__name__)
##-- end logging

class SubstitutionError(UserError):
    """ Substituting a template failed to produce a usable manifest """
    general_msg = "Bootstage Substitution Failure:"
    pass

class MissingBindingError(SubstitutionError):
    """ The template references recognized tokens that have no binding """
    general_msg = "Missing Placeholder Binding:"

    def __init__(self, msg:str, *args:Any, missing:None|list[str]=None, **kwargs:Any):
        super().__init__(msg, *args, **kwargs)
        self.missing = sorted(missing or [])

class UnknownTokenError(SubstitutionError):
    """ A token or binding key is outside the recognized placeholder set """
    general_msg = "Unknown Placeholder Token:"

    def __init__(self, msg:str, *args:Any, token:None|str=None, **kwargs:Any):
        super().__init__(msg, *args, **kwargs)
        self.token = token
