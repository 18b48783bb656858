#!/usr/bin/env python3
"""
An in-memory ninja manifest.

Generators accumulate variables, rules and build actions into a Manifest,
and only then render it to text.
Rendering is deterministic: the same manifest always produces the same bytes.
"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import logging as logmod
from dataclasses import dataclass, field

# ##-- end stdlib imports

# ##-- 1st party imports
from bootstage._interface import NINJA_VERSION
from bootstage.errors import ManifestError

# ##-- end 1st party imports

# ##-- types
# isort: off
from typing import TYPE_CHECKING, Any, Final

if TYPE_CHECKING:
    from collections.abc import Iterable

# isort: on
# ##-- end types

##-- logging
logging = logmod.getLogger(__name__)
##-- end logging

RULE_KEYS    : Final[tuple[str, ...]] = ("command", "description", "depfile", "deps", "generator", "restat", "pool")
HEADER       : Final[str]             = "# Generated by bootstage. Do not edit."

def escape_path(path:str) -> str:
    """ Escape a path for use in a build line. '$' is left alone so variables expand """
    if "\n" in path:
        raise ManifestError("Newlines are not allowed in manifest paths", path)
    return path.replace(" ", "$ ").replace(":", "$:")

def _check_value(value:str) -> str:
    if "\n" in value:
        raise ManifestError("Newlines are not allowed in manifest values", value)
    return value

def _fmt_value(value:Any) -> str:
    match value:
        case bool():
            return "1" if value else "0"
        case list() | tuple():
            return _check_value(" ".join(str(x) for x in value))
        case _:
            return _check_value(str(value))

@dataclass(frozen=True)
class Rule:
    name      : str
    command   : str
    variables : tuple[tuple[str, str], ...] = ()

    @staticmethod
    def build(name:str, command:str, **kwargs:Any) -> Rule:
        unknown = set(kwargs.keys()) - set(RULE_KEYS)
        if bool(unknown):
            raise ManifestError("Unknown rule variables for %s: %s", name, sorted(unknown))

        values = tuple((k, _fmt_value(kwargs[k])) for k in RULE_KEYS if k in kwargs and kwargs[k] not in (None, False))
        return Rule(name, _check_value(command), values)

    def render(self) -> list[str]:
        lines = ["rule {}".format(self.name), "  command = {}".format(self.command)]
        lines += ["  {} = {}".format(k, v) for k, v in self.variables]
        return lines

@dataclass
class BuildAction:
    """ One ninja build statement, and who emitted it """
    rule              : str
    outputs           : list[str]
    inputs            : list[str]       = field(default_factory=list)
    implicit          : list[str]       = field(default_factory=list)
    order_only        : list[str]       = field(default_factory=list)
    implicit_outputs  : list[str]       = field(default_factory=list)
    variables         : dict[str, str]  = field(default_factory=dict)
    source            : None|str        = None

    def render(self) -> list[str]:
        outs = " ".join(escape_path(x) for x in self.outputs)
        if bool(self.implicit_outputs):
            outs += " | " + " ".join(escape_path(x) for x in self.implicit_outputs)

        parts = [self.rule]
        parts += [escape_path(x) for x in self.inputs]
        if bool(self.implicit):
            parts.append("|")
            parts += [escape_path(x) for x in self.implicit]
        if bool(self.order_only):
            parts.append("||")
            parts += [escape_path(x) for x in self.order_only]

        lines = []
        if self.source is not None:
            lines.append("# {}".format(self.source))
        lines.append("build {}: {}".format(outs, " ".join(parts)))
        lines += ["  {} = {}".format(k, _fmt_value(v)) for k, v in sorted(self.variables.items())]
        return lines

class Manifest:
    """
      Accumulates global variables, rules, build actions, subninjas and defaults.

      Rules are global: redeclaring an identical rule is ignored,
      redeclaring a different one is an error.
      Variables keep their first declaration order, and may be reassigned.
    """

    def __init__(self):
        self.variables  : dict[str, str]    = {}
        self.rules      : dict[str, Rule]   = {}
        self.builds     : list[BuildAction] = []
        self.subninjas  : list[str]         = []
        self.defaults   : list[str]         = []
        self._outputs   : dict[str, str]    = {}

    def set_variable(self, name:str, value:Any) -> None:
        self.variables[name] = _fmt_value(value)

    def add_rule(self, name:str, command:str, **kwargs:Any) -> Rule:
        rule = Rule.build(name, command, **kwargs)
        match self.rules.get(name, None):
            case None:
                self.rules[name] = rule
            case existing if existing == rule:
                logging.debug("Ignoring identical redefinition of rule: %s", name)
            case existing:
                raise ManifestError("Conflicting definitions of rule: %s", name)

        return self.rules[name]

    def add_build(self, action:BuildAction) -> BuildAction:
        if not bool(action.outputs):
            raise ManifestError("A build action needs at least one output", action.rule)
        if action.rule != "phony" and action.rule not in self.rules:
            raise ManifestError("Build action uses an undeclared rule: %s", action.rule)

        for out in action.outputs + action.implicit_outputs:
            if out in self._outputs:
                raise ManifestError("Output %s is built by both %s and %s", out, self._outputs[out], action.source)
            self._outputs[out] = action.source

        self.builds.append(action)
        return action

    def add_subninja(self, path:str) -> None:
        if path not in self.subninjas:
            self.subninjas.append(path)

    def add_default(self, *targets:str) -> None:
        for target in targets:
            if target not in self.defaults:
                self.defaults.append(target)

    def outputs_of(self, source:str) -> list[str]:
        """ The primary outputs of every build action emitted by 'source' """
        return [out for act in self.builds if act.source == source for out in act.outputs]

    def render(self) -> str:
        lines = [HEADER, "", "ninja_required_version = {}".format(NINJA_VERSION), ""]
        if bool(self.variables):
            lines += ["{} = {}".format(k, v) for k, v in self.variables.items()]
            lines.append("")

        for rule in self.rules.values():
            lines += rule.render()
            lines.append("")

        for action in self.builds:
            lines += action.render()
            lines.append("")

        for sub in self.subninjas:
            lines.append("subninja {}".format(escape_path(sub)))
        if bool(self.subninjas):
            lines.append("")

        if bool(self.defaults):
            lines.append("default {}".format(" ".join(escape_path(x) for x in self.defaults)))
            lines.append("")

        return "\n".join(lines)
