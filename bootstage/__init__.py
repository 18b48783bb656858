#!/usr/bin/env python3
"""
Bootstage : A self-hosting, three stage, ninja manifest generator.

"""
# Imports:
from __future__ import annotations

import logging as logmod

from ._interface import __version__

##-- logging
logging = logmod.getLogger(__name__)
##-- end logging
