#!/usr/bin/env python3
"""
The Stage Orchestrator.

Runs Bootstrap -> Primary -> Main, in order, every time.
Each stage regenerates its successor's manifest only when stale,
then hands the stage's manifest to the engine.

The bootstrap stage also checks the regenerated template against the one in use.
If it drifted, the bootstrap manifest is rewritten and the stage restarts,
at most 'max_restarts' times.

"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import logging as logmod
import pathlib as pl
from dataclasses import dataclass, field

# ##-- end stdlib imports

# ##-- 1st party imports
import bootstage._interface as API  # noqa: N812
from bootstage.control.drift import describe, detect
from bootstage.control.init import refresh_bootstrap_manifest, refresh_template
from bootstage.control.machine import StageMachine
from bootstage.control.substitution import Bindings
from bootstage.enums import Drift_e, Stage_e
from bootstage.errors import (BootstageError, BootstrapConvergenceError,
                              StageExecutionError)
from bootstage.utils.files import is_stale

# ##-- end 1st party imports

# ##-- types
# isort: off
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from bootstage._abstract.control import Engine_p, Generator_p
    from bootstage._structs.layout import BuildLayout

# isort: on
# ##-- end types

##-- logging
logging = logmod.getLogger(__name__)
printer = logmod.getLogger(API.PRINTER_NAME)
##-- end logging

@dataclass
class OrchestratorReport:
    """ What a run did """
    stages         : list[Stage_e]  = field(default_factory=list)
    regenerations  : list[str]      = field(default_factory=list)
    restarts       : int            = 0

class Orchestrator:
    """
      generators maps a stage to the generator of its successor's manifest:
      {Stage_e.BOOTSTRAP : CanonicalGenerator, Stage_e.PRIMARY : EngineTargetGenerator}
    """

    def __init__(self, layout:BuildLayout, engine:Engine_p, generators:Mapping[Stage_e, Generator_p], *, bindings:None|Bindings=None, max_restarts:int=API.DEFAULT_RESTARTS):
        match max_restarts:
            case bool():
                raise TypeError("max_restarts must be an int", max_restarts)
            case int() if 0 <= max_restarts:
                pass
            case _:
                raise ValueError("max_restarts must be a finite int >= 0", max_restarts)

        self.layout        = layout
        self.engine        = engine
        self.generators    = dict(generators)
        self.max_restarts  = max_restarts
        self._bindings     = bindings
        self.machine       = StageMachine()

    @property
    def bindings(self) -> Bindings:
        if self._bindings is None:
            if not self.layout.bindings.is_file():
                raise StageExecutionError("Build directory is not initialised, run 'bootstage init': %s", str(self.layout.build_dir),
                                          stage=Stage_e.BOOTSTRAP)
            self._bindings = Bindings.load(self.layout.bindings)

        return self._bindings

    def run(self, targets:None|Iterable[str]=None) -> OrchestratorReport:
        """ Run every stage. Any error fails the machine, and propagates """
        report        = OrchestratorReport()
        self.machine  = StageMachine()
        try:
            while not self.machine.current_state.final:
                stage = self.machine.stage
                printer.info("---- Stage: %s", stage.name)
                match stage:
                    case Stage_e.BOOTSTRAP:
                        self._bootstrap(report)
                    case Stage_e.PRIMARY:
                        self._primary(report)
                    case Stage_e.MAIN:
                        self._main(targets)

                report.stages.append(stage)
                self.machine.send("advance")
        except BootstageError as err:
            if err.stage is None:
                err.stage = self.machine.stage
            self.machine.send("fail")
            raise
        except Exception:
            self.machine.send("fail")
            raise

        return report

    def _regenerate(self, stage:Stage_e, report:OrchestratorReport, *, force:bool=False) -> bool:
        match self.generators.get(stage, None):
            case None:
                logging.debug("No Generator for: %s", stage.name)
                return False
            case gen if not (force or is_stale(gen.outputs(), gen.inputs())):
                logging.info("Fresh: %s", ", ".join(str(x) for x in gen.outputs()))
                return False
            case gen:
                pass

        printer.info("Regenerating with: %s", gen.name)
        gen.generate()
        report.regenerations.append(gen.name)
        return True

    def _bootstrap(self, report:OrchestratorReport) -> None:
        bindings = self.bindings
        force    = False
        refresh_template(self.layout, bindings)
        refresh_bootstrap_manifest(self.layout, bindings)
        while True:
            committed = self.layout.template.read_text()
            self._regenerate(Stage_e.BOOTSTRAP, report, force=force)
            candidate = self.layout.template.read_text()
            match detect(candidate, committed):
                case Drift_e.UNCHANGED:
                    break
                case Drift_e.CHANGED if self.max_restarts <= report.restarts:
                    logging.warning("Template Drift:\n%s", describe(candidate, committed))
                    raise BootstrapConvergenceError("Bootstrap template still changing after %s restart(s): %s",
                                                    report.restarts,
                                                    str(self.layout.template),
                                                    stage=Stage_e.BOOTSTRAP)
                case Drift_e.CHANGED:
                    printer.warning("Bootstrap Template Changed, Restarting")
                    logging.info("Template Drift:\n%s", describe(candidate, committed))
                    refresh_bootstrap_manifest(self.layout, bindings, force=True)
                    report.restarts += 1
                    self.machine.send("restart")
                    force = True

        self.engine.run(self.layout.bootstrap_manifest)

    def _primary(self, report:OrchestratorReport) -> None:
        if not self.layout.primary_manifest.is_file():
            raise StageExecutionError("Missing primary manifest: %s", str(self.layout.primary_manifest), stage=Stage_e.PRIMARY)

        self._regenerate(Stage_e.PRIMARY, report)
        self.engine.run(self.layout.primary_manifest)

    def _main(self, targets:None|Iterable[str]) -> None:
        if not self.layout.main_manifest.is_file():
            raise StageExecutionError("Missing main manifest: %s", str(self.layout.main_manifest), stage=Stage_e.MAIN)

        self.engine.run(self.layout.main_manifest, targets=list(targets or []))
