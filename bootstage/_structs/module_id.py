#!/usr/bin/env python3
"""
Identifiers for module instances.

A module declared with variants, eg: `variants = { arch = ["arm", "x86"] }`,
produces one instance per combination of axis values.
Each instance is identified by its name and its variant,
where the variant is a sorted tuple of (axis, value) pairs.

Dependency specs take the form `name` or `name{axis=value,...}`.
"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import itertools as itz
import logging as logmod
import re
from collections.abc import Mapping
from dataclasses import dataclass, field

# ##-- end stdlib imports

# ##-- types
# isort: off
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from typing import Final
    from collections.abc import Iterable

# isort: on
# ##-- end types

##-- logging
logging = logmod.getLogger(__name__)
##-- end logging

Variant       : TypeAlias    = tuple[tuple[str, str], ...]
NO_VARIANT    : Final[tuple] = ()
DEP_RE        : Final        = re.compile(r"^(?P<name>[^{}\s]+)(?:\{(?P<variant>[^{}]*)\})?$")

def make_variant(values:None|Mapping[str, str]|Iterable[tuple[str, str]]) -> Variant:
    """ Normalise axis values into a hashable, sorted variant """
    match values:
        case None:
            return NO_VARIANT
        case Mapping():
            return tuple(sorted((str(k), str(v)) for k,v in values.items()))
        case _:
            return tuple(sorted((str(k), str(v)) for k,v in values))

def expand_variants(axes:Mapping[str, list[str]]) -> list[Variant]:
    """ The cartesian product of every axis' values, in a stable order.
      No axes means a single, empty, variant.
    """
    if not bool(axes):
        return [NO_VARIANT]

    names   = sorted(axes.keys())
    product = itz.product(*(axes[x] for x in names))
    return [tuple(zip(names, combo, strict=True)) for combo in product]

def format_variant(variant:Variant) -> str:
    if not bool(variant):
        return ""
    return "{%s}" % ",".join("{}={}".format(k, v) for k,v in variant)

@dataclass(frozen=True, order=True)
class ModuleId:
    """ A single module instance in the graph """
    name    : str
    variant : Variant = field(default=NO_VARIANT)

    def __str__(self) -> str:
        return "{}{}".format(self.name, format_variant(self.variant))

    def sort_key(self) -> tuple[str, Variant]:
        return (self.name, self.variant)

    @property
    def axes(self) -> dict[str, str]:
        return dict(self.variant)

@dataclass(frozen=True)
class DependencySpec:
    """ A parsed entry of a module's `deps` list """
    name     : str
    explicit : Variant = field(default=NO_VARIANT)

    @staticmethod
    def build(raw:str) -> DependencySpec:
        match DEP_RE.match(raw.strip()):
            case None:
                raise ValueError("Malformed dependency", raw)
            case m if not m['variant']:
                return DependencySpec(m['name'])
            case m:
                pairs = []
                for part in m['variant'].split(","):
                    match part.split("="):
                        case [axis, value] if axis.strip() and value.strip():
                            pairs.append((axis.strip(), value.strip()))
                        case _:
                            raise ValueError("Malformed dependency variant", raw)

                return DependencySpec(m['name'], make_variant(pairs))

    def __str__(self) -> str:
        return "{}{}".format(self.name, format_variant(self.explicit))
