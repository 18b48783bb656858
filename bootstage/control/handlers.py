#!/usr/bin/env python3
"""
Maps errors to exit codes, logging a one line diagnostic for each.
"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import logging as logmod
import pathlib as pl
from bdb import BdbQuit

# ##-- end stdlib imports

# ##-- 3rd party imports
import stackprinter

# ##-- end 3rd party imports

# ##-- 1st party imports
import bootstage._interface as API  # noqa: N812
import bootstage.errors as berrs

# ##-- end 1st party imports

##-- logging
logging = logmod.getLogger(__name__)
##-- end logging

class ErrorHandlers:
    """ Mixin for handling different errors of bootstage """

    def discriminate_exit(self, err:Exception) -> int:
        result : int
        match err:
            case berrs.EarlyExit() | KeyboardInterrupt() | BdbQuit():
                result = self._early_exit(err)
            case berrs.MissingConfigError():
                result = self._missing_config_exit(err)
            case berrs.ConfigError():
                result = self._config_error_exit(err)
            case berrs.SubstitutionError():
                result = self._substitution_exit(err)
            case berrs.BootstrapConvergenceError():
                result = self._convergence_exit(err)
            case berrs.StageExecutionError():
                result = self._stage_failed_exit(err)
            case berrs.BuildDescriptionError():
                result = self._description_exit(err)
            case berrs.DependencyCycleError():
                result = self._cycle_exit(err)
            case berrs.PrimaryBuilderError():
                result = self._primary_builder_exit(err)
            case berrs.GraphError():
                result = self._graph_exit(err)
            case berrs.BootstageError():
                result = self._misc_bootstage_exit(err)
            case NotImplementedError():
                result = self._not_implemented_exit(err)
            case _:
                result = self.python_exit(err)
        ##--|
        return result

    def _early_exit(self, err:Exception) -> int:  # noqa: ARG002
        logging.warning("Early Exit Triggered")
        return API.ExitCodes.EARLY

    def _stage(self, err:berrs.BootstageError) -> str:
        match err.stage_name:
            case "":
                return ""
            case name:
                return "Stage {} : ".format(name)

    def _missing_config_exit(self, err:berrs.MissingConfigError) -> int:
        logging.error("[%s] : %sMissing Config: %s", type(err).__name__, self._stage(err), err)
        return API.ExitCodes.MISSING_CONFIG

    def _config_error_exit(self, err:berrs.ConfigError) -> int:
        logging.error("[%s] : %sConfig Error: %s", type(err).__name__, self._stage(err), err)
        return API.ExitCodes.BAD_CONFIG

    def _substitution_exit(self, err:berrs.SubstitutionError) -> int:
        match err:
            case berrs.MissingBindingError(missing=[*xs]) if bool(xs):
                logging.error("[%s] : %sMissing Bindings: %s", type(err).__name__, self._stage(err), ", ".join(xs))
            case berrs.UnknownTokenError(token=str() as tok):
                logging.error("[%s] : %sUnknown Token: %s", type(err).__name__, self._stage(err), tok)
            case _:
                logging.error("[%s] : %s%s", type(err).__name__, self._stage(err), err)

        return API.ExitCodes.BAD_SUBSTITUTION

    def _convergence_exit(self, err:berrs.BootstrapConvergenceError) -> int:
        logging.error("[%s] : %s%s", type(err).__name__, self._stage(err), err)
        return API.ExitCodes.NO_CONVERGENCE

    def _stage_failed_exit(self, err:berrs.StageExecutionError) -> int:
        logging.error("[%s] : %sFailed: %s", type(err).__name__, self._stage(err), err)
        return API.ExitCodes.STAGE_FAIL

    def _description_exit(self, err:berrs.BuildDescriptionError) -> int:
        logging.error("[%s] : %s%s", type(err).__name__, self._stage(err), err)
        return API.ExitCodes.BAD_DESCRIPTION

    def _cycle_exit(self, err:berrs.DependencyCycleError) -> int:
        logging.error("[%s] : %sCycle: %s", type(err).__name__, self._stage(err), err)
        return API.ExitCodes.BAD_GRAPH

    def _primary_builder_exit(self, err:berrs.PrimaryBuilderError) -> int:
        logging.error("[%s] : %s%s", type(err).__name__, self._stage(err), err)
        return API.ExitCodes.BAD_GRAPH

    def _graph_exit(self, err:berrs.GraphError) -> int:
        logging.error("[%s] : %s%s", type(err).__name__, self._stage(err), err)
        return API.ExitCodes.BAD_GRAPH

    def _misc_bootstage_exit(self, err:berrs.BootstageError) -> int:
        logging.error("[%s] : %s%s", type(err).__name__, self._stage(err), err, exc_info=err)
        return API.ExitCodes.BOOTSTAGE_FAIL

    def _not_implemented_exit(self, err:NotImplementedError) -> int:
        logging.error("[%s] : Not Implemented: %s", type(err).__name__, err.args, exc_info=err)
        return API.ExitCodes.NOT_IMPLEMENTED

    def python_exit(self, err:Exception) -> int:
        logging.error("[%s] : Python Error:", type(err).__name__, exc_info=err)
        lasterr = pl.Path(API.LASTERR).resolve()
        lasterr.write_text(stackprinter.format(err))
        logging.error("[%s] : Python Error, full stacktrace written to %s", type(err).__name__, lasterr)
        return API.ExitCodes.PYTHON_FAIL
