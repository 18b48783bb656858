#!/usr/bin/env python3
"""
The protocols module types and singletons implement to take part in graph building.

A module type is registered as a factory: a callable taking validated properties
and returning a Module_p.
Singletons are registered as zero-argument factories returning a Singleton_p.
"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import logging as logmod

# ##-- end stdlib imports

# ##-- 1st party imports
from bootstage._structs.properties import ModuleProperties

# ##-- end 1st party imports

# ##-- types
# isort: off
from typing import TYPE_CHECKING, ClassVar
# Protocols:
from typing import Protocol, runtime_checkable

if TYPE_CHECKING:
    from bootstage.graph.contexts import ModuleContext, SingletonContext

# isort: on
# ##-- end types

##-- logging
logging = logmod.getLogger(__name__)
##-- end logging

@runtime_checkable
class Module_p(Protocol):
    """
    A single module instance, able to emit its build actions
    """

    def generate_build_actions(self, ctx:ModuleContext) -> None:
        pass

@runtime_checkable
class Singleton_p(Protocol):
    """
    Invoked once per build, after every module has emitted its actions
    """

    def generate_build_actions(self, ctx:SingletonContext) -> None:
        pass

class Module_i(Module_p):
    """ Core Interface for module types.

      Subclasses set 'Properties' to a ModuleProperties subclass
      to declare the properties their declarations accept.
    """

    Properties          : ClassVar[type[ModuleProperties]] = ModuleProperties
    is_primary_builder  : bool                             = False
    is_tool             : bool                             = False

    def __init__(self, properties:ModuleProperties):
        self.properties = properties

    @property
    def name(self) -> str:
        return self.properties.name

    def __repr__(self) -> str:
        return "<{}: {}>".format(self.__class__.__name__, self.name)
