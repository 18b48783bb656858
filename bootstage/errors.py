#!/usr/bin/env python3
"""
These are the bootstage specific errors that can occur
"""
# Imports:
from __future__ import annotations

# ##-- 1st party imports
from bootstage._errors.base import BootstageError, BackendError, UserError
from bootstage._errors.config import ConfigError, InvalidConfigError, MissingConfigError
from bootstage._errors.control import (BootstrapConvergenceError, ControlError,
                                       StageExecutionError)
from bootstage._errors.graph import (BuildDescriptionError, DependencyCycleError,
                                     DuplicateModuleError, DuplicateModuleTypeError,
                                     DuplicateSingletonError, GraphError,
                                     ManifestError, MissingDependencyError,
                                     ModuleError, MultiplePrimaryBuilderError,
                                     NoPrimaryBuilderError, PrimaryBuilderError,
                                     RegistrationError, UnknownModuleTypeError)
from bootstage._errors.substitute import (MissingBindingError, SubstitutionError,
                                          UnknownTokenError)

# ##-- end 1st party imports

class EarlyExit(Exception):
    """ Bootstage was instructed to shut down before completing the requested command """
    pass
