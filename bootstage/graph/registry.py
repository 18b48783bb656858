#!/usr/bin/env python3
"""
Name -> factory registries for module types and singletons.

Registration order is preserved, and is the order singletons are invoked in.
A registry can be frozen once building starts, after which registration fails.
"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import logging as logmod
import threading

# ##-- end stdlib imports

# ##-- 1st party imports
from bootstage.errors import RegistrationError

# ##-- end 1st party imports

# ##-- types
# isort: off
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

# isort: on
# ##-- end types

##-- logging
logging = logmod.getLogger(__name__)
##-- end logging

class Registry:
    """ A thread safe, ordered, name -> factory mapping.

      'kind' is used in error messages,
      'dup_error' is raised when a name is registered twice.
    """

    def __init__(self, kind:str, *, dup_error:type[RegistrationError]=RegistrationError):
        self._kind      : str                         = kind
        self._dup_error : type[RegistrationError]     = dup_error
        self._entries   : dict[str, Callable]         = {}
        self._lock      : threading.RLock             = threading.RLock()
        self._frozen    : bool                        = False

    def register(self, name:str, factory:Callable[..., Any]) -> None:
        if not isinstance(name, str) or not bool(name.strip()):
            raise RegistrationError("Bad %s name: %s", self._kind, repr(name), name=name)
        if not callable(factory):
            raise RegistrationError("%s factory for %s is not callable", self._kind, name, name=name)

        with self._lock:
            if self._frozen:
                raise RegistrationError("Tried to register %s %s after building started", self._kind, name, name=name)
            if name in self._entries:
                raise self._dup_error("Duplicate %s registration: %s", self._kind, name, name=name)

            logging.debug("Registering %s: %s", self._kind, name)
            self._entries[name] = factory

    def freeze(self) -> None:
        with self._lock:
            self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, name:str) -> None|Callable:
        with self._lock:
            return self._entries.get(name, None)

    def items(self) -> list[tuple[str, Callable]]:
        with self._lock:
            return list(self._entries.items())

    def copy(self) -> Registry:
        """ An unfrozen registry with the same entries """
        dup = Registry(self._kind, dup_error=self._dup_error)
        with self._lock:
            dup._entries.update(self._entries)
        return dup

    def __contains__(self, name:str) -> bool:
        with self._lock:
            return name in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def names(self) -> list[str]:
        with self._lock:
            return list(self._entries.keys())

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
