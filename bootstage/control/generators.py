#!/usr/bin/env python3
"""
The generators the orchestrator invokes when a stage's manifest is stale.

CanonicalGenerator    : runs minibp in process, writing the primary manifest and the candidate template.
EngineTargetGenerator : asks the engine to build a manifest target, ie: the primary builder writing build.ninja.
"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import logging as logmod
import pathlib as pl

# ##-- end stdlib imports

# ##-- 3rd party imports
from tomlguard import TomlGuard

# ##-- end 3rd party imports

# ##-- 1st party imports
import bootstage._interface as API  # noqa: N812
from bootstage._abstract.control import Generator_p
from bootstage.bootstrap.main import generate
from bootstage.enums import Stage_e
from bootstage.graph.context import Context
from bootstage.utils.files import read_depfile

# ##-- end 1st party imports

# ##-- types
# isort: off
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from bootstage._abstract.control import Engine_p
    from bootstage._structs.layout import BuildLayout

# isort: on
# ##-- end types

##-- logging
logging = logmod.getLogger(__name__)
##-- end logging

class CanonicalGenerator(Generator_p):
    """ minibp, without the separate binary.
      The template is not an output for staleness, only the primary manifest is.
    """

    name = "minibp"

    def __init__(self, layout:BuildLayout, *, config:None|TomlGuard=None, context:None|Callable[[], Context]=None):
        self.layout   = layout
        self.config   = config if config is not None else TomlGuard({})
        self._context = context or self._default_context

    def _default_context(self) -> Context:
        return Context(workers=self.config.on_fail(API.DEFAULT_WORKERS, int).settings.load_workers())

    def outputs(self) -> list[pl.Path]:
        return [self.layout.primary_manifest]

    def inputs(self) -> list[pl.Path]:
        return [*read_depfile(self.layout.primary_depfile), self.layout.bootstrap_manifest]

    def generate(self) -> None:
        generate(self._context(),
                 root=self.layout.root,
                 build_dir=self.layout.build_dir,
                 output=self.layout.primary_manifest,
                 depfile=self.layout.primary_depfile,
                 template=self.layout.template,
                 stage=Stage_e.PRIMARY,
                 config=self.config)

class EngineTargetGenerator(Generator_p):
    """ Delegates generation to the engine, building 'targets' of 'manifest'.
      Staleness is judged from 'outputs', the entries of 'depfile', and the manifest itself.
    """

    def __init__(self, engine:Engine_p, manifest:pl.Path, *, targets:Iterable[str], outputs:Iterable[pl.Path], depfile:None|pl.Path=None, name:str="primary_builder"):
        self.engine    = engine
        self.manifest  = pl.Path(manifest)
        self.targets   = list(targets)
        self._outputs  = [pl.Path(x) for x in outputs]
        self.depfile   = None if depfile is None else pl.Path(depfile)
        self.name      = name

    @staticmethod
    def primary_builder(engine:Engine_p, layout:BuildLayout) -> EngineTargetGenerator:
        return EngineTargetGenerator(engine,
                                     layout.primary_manifest,
                                     targets=[str(layout.main_manifest)],
                                     outputs=[layout.main_manifest],
                                     depfile=layout.main_depfile)

    def outputs(self) -> list[pl.Path]:
        return list(self._outputs)

    def inputs(self) -> list[pl.Path]:
        if self.depfile is None:
            return [self.manifest]
        return [*read_depfile(self.depfile), self.manifest]

    def generate(self) -> None:
        logging.info("Generating %s with: %s", ", ".join(self.targets), self.manifest)
        self.engine.run(self.manifest, targets=self.targets)
