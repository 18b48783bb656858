#!/usr/bin/env python3
"""
Protocols of the stage orchestrator's collaborators
"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import logging as logmod

# ##-- end stdlib imports

# ##-- types
# isort: off
from typing import TYPE_CHECKING
# Protocols:
from typing import Protocol, runtime_checkable

if TYPE_CHECKING:
    import pathlib as pl
    from collections.abc import Iterable

# isort: on
# ##-- end types

##-- logging
logging = logmod.getLogger(__name__)
##-- end logging

@runtime_checkable
class Engine_p(Protocol):
    """
    Executes a manifest. Bootstage never schedules build actions itself.
    """

    def run(self, manifest:pl.Path, *, targets:None|Iterable[str]=None) -> None:
        pass

@runtime_checkable
class Generator_p(Protocol):
    """
    Produces a manifest from build descriptions.
    outputs and inputs are used to decide staleness.
    """

    name : str

    def outputs(self) -> list[pl.Path]:
        pass

    def inputs(self) -> list[pl.Path]:
        pass

    def generate(self) -> None:
        pass
