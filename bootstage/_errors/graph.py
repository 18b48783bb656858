#!/usr/bin/env python3
"""
Errors raised by the module graph builder:
registration, description loading, graph validation, and action emission.
"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import logging as logmod
from typing import Any

# ##-- end stdlib imports

from .base import BackendError, UserError

##-- logging
logging = logmod.getLogger(__name__)
##-- end logging

class GraphError(BackendError):
    """ The module graph could not be built """
    general_msg = "Bootstage Graph Failure:"
    pass

##--| registration

class RegistrationError(GraphError):
    """ Module types or singletons were registered improperly """
    general_msg = "Bootstage Registration Failure:"

    def __init__(self, msg:str, *args:Any, name:None|str=None, **kwargs:Any):
        super().__init__(msg, *args, **kwargs)
        self.name = name

class DuplicateModuleTypeError(RegistrationError):
    pass

class DuplicateSingletonError(RegistrationError):
    pass

##--| description

class BuildDescriptionError(GraphError, UserError):
    """ A build description file, or a declaration in it, is malformed """
    general_msg = "Bad Build Description:"
    pass

class UnknownModuleTypeError(BuildDescriptionError):
    pass

class DuplicateModuleError(BuildDescriptionError):
    pass

class MissingDependencyError(BuildDescriptionError):
    pass

##--| validation

class PrimaryBuilderError(GraphError):
    """ The 'exactly one primary builder' invariant was broken """
    general_msg = "Primary Builder Failure:"

    def __init__(self, msg:str, *args:Any, modules:None|list=None, **kwargs:Any):
        super().__init__(msg, *args, **kwargs)
        self.modules = list(modules or [])

class MultiplePrimaryBuilderError(PrimaryBuilderError):
    pass

class NoPrimaryBuilderError(PrimaryBuilderError):
    pass

class DependencyCycleError(GraphError):
    """ The module dependency graph is not a DAG """
    general_msg = "Dependency Cycle:"

    def __init__(self, msg:str, *args:Any, cycle:None|list=None, **kwargs:Any):
        super().__init__(msg, *args, **kwargs)
        self.cycle = list(cycle or [])

    @property
    def members(self) -> set[str]:
        return {x.name for x in self.cycle}

##--| emission

class ModuleError(GraphError):
    """ A module type failed while generating its build actions """
    general_msg = "Module Failure:"
    pass

class ManifestError(GraphError):
    """ Build actions or rules could not be assembled into a manifest """
    general_msg = "Manifest Failure:"
    pass
