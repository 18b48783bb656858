#!/usr/bin/env python3
"""
The dependency network of module instances.

Nodes are ModuleIds, carrying a ModuleInfo.
Edges point from a dependent to its dependency.
"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import logging as logmod
from dataclasses import dataclass

# ##-- end stdlib imports

# ##-- 3rd party imports
import networkx as nx

# ##-- end 3rd party imports

# ##-- 1st party imports
from bootstage._structs.module_id import DependencySpec, ModuleId
from bootstage.errors import (DependencyCycleError, DuplicateModuleError,
                              MissingDependencyError, MultiplePrimaryBuilderError,
                              NoPrimaryBuilderError)

# ##-- end 1st party imports

# ##-- types
# isort: off
from typing import TYPE_CHECKING, Any, Final

if TYPE_CHECKING:
    from collections.abc import Iterator
    from bootstage._abstract.module import Module_p
    from bootstage._structs.location import SourceLocation
    from bootstage._structs.properties import ModuleProperties

# isort: on
# ##-- end types

##-- logging
logging = logmod.getLogger(__name__)
##-- end logging

INFO : Final[str] = "info"

@dataclass(frozen=True)
class ModuleInfo:
    """ Everything known about one module instance """
    module_id   : ModuleId
    type_name   : str
    module      : Module_p
    properties  : ModuleProperties
    location    : SourceLocation
    directory   : Any

    @property
    def name(self) -> str:
        return self.module_id.name

    @property
    def is_primary_builder(self) -> bool:
        return bool(getattr(self.module, "is_primary_builder", False))

    @property
    def is_tool(self) -> bool:
        return bool(getattr(self.module, "is_tool", False))

class ModuleNetwork:
    """ the network of module instances and their dependencies """

    def __init__(self):
        self.network    : nx.DiGraph                  = nx.DiGraph()
        self._by_name   : dict[str, list[ModuleId]]   = {}
        self._axes      : dict[str, set[str]]         = {}
        self._declared  : dict[str, SourceLocation]   = {}

    def declare(self, name:str, axes:set[str], location:SourceLocation) -> None:
        """ Reserve a module name. Names are unique across the whole tree """
        if name in self._declared:
            raise DuplicateModuleError("Duplicate module name: %s (first declared at %s)",
                                       name, self._declared[name], location=location)
        self._declared[name] = location
        self._by_name[name]  = []
        self._axes[name]     = set(axes)

    def add(self, info:ModuleInfo) -> None:
        assert(info.name in self._declared)
        self.network.add_node(info.module_id, **{INFO: info})
        self._by_name[info.name].append(info.module_id)

    def info(self, node:ModuleId) -> ModuleInfo:
        return self.network.nodes[node][INFO]

    def infos(self) -> Iterator[ModuleInfo]:
        for node in sorted(self.network.nodes, key=ModuleId.sort_key):
            yield self.info(node)

    def __len__(self) -> int:
        return len(self.network)

    def __contains__(self, node:ModuleId) -> bool:
        return node in self.network

    ##--| wiring

    def connect_all(self) -> None:
        """ Resolve every declared dependency into edges """
        for node in sorted(self.network.nodes, key=ModuleId.sort_key):
            info = self.info(node)
            for raw in info.properties.deps:
                for target in self.resolve(info, raw):
                    self.network.add_edge(node, target)

    def resolve(self, info:ModuleInfo, raw:str) -> list[ModuleId]:
        """ Find the instances a dependency spec refers to, from the point of view of 'info'.

          The requested variation is the dependent's own values on the target's axes,
          overridden by explicit values in the dependency.
        """
        try:
            spec = DependencySpec.build(raw)
        except ValueError as err:
            raise MissingDependencyError("Malformed dependency '%s' of %s", raw, info.module_id, location=info.location) from err

        if spec.name not in self._by_name:
            raise MissingDependencyError("%s depends on unknown module: %s", info.module_id, spec.name, location=info.location)

        target_axes = self._axes[spec.name]
        explicit    = dict(spec.explicit)
        if bool(unknown:=set(explicit.keys()) - target_axes):
            raise MissingDependencyError("%s requests variant axes %s which %s does not have",
                                         info.module_id, sorted(unknown), spec.name, location=info.location)

        requested   = {k:v for k,v in info.module_id.variant if k in target_axes}
        requested.update(explicit)
        matches     = [x for x in self._by_name[spec.name] if all(x.axes.get(k) == v for k,v in requested.items())]
        if not bool(matches):
            raise MissingDependencyError("No variant of %s matches %s for %s",
                                         spec.name, requested, info.module_id, location=info.location)

        return sorted(matches, key=ModuleId.sort_key)

    ##--| validation

    def validate(self, *, require_primary_builder:bool=False) -> None:
        self.validate_primary_builder(required=require_primary_builder)
        self.validate_acyclic()

    def validate_primary_builder(self, *, required:bool=False) -> None:
        marked = [x.module_id for x in self.infos() if x.is_primary_builder]
        match marked:
            case [] if required:
                raise NoPrimaryBuilderError("No module is marked as the primary builder")
            case [_, _, *_]:
                raise MultiplePrimaryBuilderError("Multiple primary builders: %s",
                                                  ", ".join(str(x) for x in marked),
                                                  modules=marked)
            case _:
                pass

    def validate_acyclic(self) -> None:
        if nx.is_directed_acyclic_graph(self.network):
            return

        edges   = nx.find_cycle(self.network)
        members = [u for u, _ in edges]
        start   = members.index(min(members, key=ModuleId.sort_key))
        cycle   = members[start:] + members[:start]
        path    = " -> ".join(str(x) for x in cycle + cycle[:1])
        raise DependencyCycleError("%s", path, cycle=cycle, location=self.info(cycle[0]).location)

    ##--| traversal

    def emission_order(self) -> list[ModuleId]:
        """ Dependencies before dependents, ties broken by name then variant """
        return list(nx.lexicographical_topological_sort(self.network.reverse(copy=False), key=ModuleId.sort_key))

    def primary_builder(self) -> None|ModuleInfo:
        for info in self.infos():
            if info.is_primary_builder:
                return info
        else:
            return None

    def direct_deps(self, node:ModuleId) -> list[ModuleInfo]:
        return [self.info(x) for x in sorted(self.network.succ[node], key=ModuleId.sort_key)]

    def deps_depth_first(self, node:ModuleId) -> list[ModuleInfo]:
        """ Every transitive dependency, each once, deepest first """
        found : list[ModuleId] = []
        seen  : set[ModuleId]  = {node}

        def visit(focus:ModuleId) -> None:
            for dep in sorted(self.network.succ[focus], key=ModuleId.sort_key):
                if dep in seen:
                    continue
                seen.add(dep)
                visit(dep)
                found.append(dep)

        visit(node)
        return [self.info(x) for x in found]
