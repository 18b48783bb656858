#!/usr/bin/env python3
"""

"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import logging as logmod

# ##-- end stdlib imports

from .base import UserError

##-- logging
logging = logmod.getLogger(__name__)
##-- end logging

class ConfigError(UserError):
    """ An Error in the bootstage.toml file """
    general_msg = "Bootstage Config Error:"
    pass

class MissingConfigError(ConfigError):
    pass

class InvalidConfigError(ConfigError):
    pass
