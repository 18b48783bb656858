#!/usr/bin/env python3
"""
The contexts handed to modules and singletons while they emit build actions.

A ModuleContext is scoped to one module instance,
a SingletonContext sees the whole network.
Both write into the same manifest.
"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import logging as logmod
import pathlib as pl

# ##-- end stdlib imports

# ##-- 1st party imports
from bootstage._structs.manifest import BuildAction
from bootstage.errors import ModuleError

# ##-- end 1st party imports

# ##-- types
# isort: off
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from bootstage._structs.location import SourceLocation
    from bootstage._structs.manifest import Manifest
    from bootstage._structs.module_id import ModuleId
    from bootstage.graph.network import ModuleInfo, ModuleNetwork

# isort: on
# ##-- end types

##-- logging
logging = logmod.getLogger(__name__)
##-- end logging

def _as_list(val:None|str|Iterable[str]) -> list[str]:
    match val:
        case None:
            return []
        case str():
            return [val]
        case _:
            return list(val)

class _EmitContext_m:
    """ Shared emission methods. Expects _manifest, _source and _location """

    _manifest  : Manifest
    _source    : str
    _location  : None|SourceLocation

    def rule(self, name:str, command:str, **kwargs:Any) -> str:
        """ Declare a global rule. Redeclaring it identically is a no-op """
        self._manifest.add_rule(name, command, **kwargs)
        return name

    def build(self, rule:str, outputs:str|Iterable[str], inputs:None|str|Iterable[str]=None, *,
              implicit:None|Iterable[str]=None,
              order_only:None|Iterable[str]=None,
              implicit_outputs:None|Iterable[str]=None,
              variables:None|dict[str, Any]=None) -> BuildAction:
        action = BuildAction(rule,
                             _as_list(outputs),
                             inputs=_as_list(inputs),
                             implicit=_as_list(implicit),
                             order_only=_as_list(order_only),
                             implicit_outputs=_as_list(implicit_outputs),
                             variables=dict(variables or {}),
                             source=self._source)
        return self._manifest.add_build(action)

    def error(self, msg:str, *args:Any) -> ModuleError:
        """ Build an error located at the current declaration. Raise the result """
        return ModuleError("%s: " + msg, self._source, *args, location=self._location)

class ModuleContext(_EmitContext_m):
    """ Scoped to a single module instance """

    def __init__(self, *, info:ModuleInfo, network:ModuleNetwork, manifest:Manifest, src_root:pl.Path, config:Any=None, dirs:None|set[pl.Path]=None):
        self._info      = info
        self._src_root  = pl.Path(src_root)
        self._network   = network
        self._manifest  = manifest
        self._source    = str(info.module_id)
        self._location  = info.location
        self.config     = config
        self._dirs      = dirs if dirs is not None else set()

    @property
    def module_id(self) -> ModuleId:
        return self._info.module_id

    @property
    def module_name(self) -> str:
        return self._info.name

    @property
    def properties(self) -> Any:
        return self._info.properties

    @property
    def location(self) -> SourceLocation:
        return self._info.location

    @property
    def directory(self) -> pl.Path:
        """ The module's directory, relative to the source root """
        return self._info.directory

    def visit_direct_deps(self, fn:Callable[[ModuleInfo], None]) -> None:
        for dep in self._network.direct_deps(self.module_id):
            fn(dep)

    def visit_deps_depth_first(self, fn:Callable[[ModuleInfo], None]) -> None:
        for dep in self._network.deps_depth_first(self.module_id):
            fn(dep)

    def src_path(self, rel:str|pl.Path, *, directory:None|pl.Path=None) -> str:
        """ A source file as a manifest path, rooted at $srcDir """
        match pl.Path(directory or self.directory):
            case pl.Path(parts=()):
                return "$srcDir/{}".format(pl.Path(rel).as_posix())
            case base:
                return "$srcDir/{}".format((base / rel).as_posix())

    def glob(self, patterns:Iterable[str], *, exclude:None|Iterable[str]=None, directory:None|pl.Path=None) -> list[str]:
        """ Expand source globs relative to a module's directory, sorted.
          Returns paths relative to that directory.
          Every directory the patterns walk is recorded, as a depfile input.
        """
        root      = self._src_root / (directory or self.directory)
        excluded  : set[str]  = set()
        found     : set[str]  = set()
        for pattern in exclude or []:
            excluded.update(x.relative_to(root).as_posix() for x in root.glob(pattern))

        for pattern in patterns:
            found.update(x.relative_to(root).as_posix() for x in root.glob(pattern) if x.is_file())
            self._dirs.update(self._walked(root, pattern))

        return sorted(found - excluded)

    def _walked(self, root:pl.Path, pattern:str) -> list[pl.Path]:
        match pl.PurePath(pattern).parent:
            case pl.PurePath(parts=()):
                return [root.absolute()] if root.is_dir() else []
            case parent:
                return [x.absolute() for x in root.glob(parent.as_posix()) if x.is_dir()]

class SingletonContext(_EmitContext_m):
    """ Sees every module. Used for cross-cutting build actions """

    def __init__(self, *, name:str, network:ModuleNetwork, manifest:Manifest, config:Any=None):
        self._network   = network
        self._manifest  = manifest
        self._source    = name
        self._location  = None
        self.name       = name
        self.config     = config

    def phony(self, name:str, deps:Iterable[str]) -> BuildAction:
        return self.build("phony", name, sorted(deps))

    def set_variable(self, name:str, value:Any) -> None:
        self._manifest.set_variable(name, value)

    def add_subninja(self, path:str) -> None:
        self._manifest.add_subninja(path)

    def add_default(self, *targets:str) -> None:
        self._manifest.add_default(*targets)

    def visit_all_modules(self, fn:Callable[[ModuleInfo], None]) -> None:
        """ in emission order """
        for node in self._network.emission_order():
            fn(self._network.info(node))

    def primary_builder(self) -> None|ModuleInfo:
        return self._network.primary_builder()

    def outputs_of(self, info:ModuleInfo) -> list[str]:
        return self._manifest.outputs_of(str(info.module_id))
