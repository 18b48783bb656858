#!/usr/bin/env python3
"""
The module types the bootstrap layer registers.

bootstrap_py_package     : a python package, byte-compiled into a stamp in every manifest.
bootstrap_core_py_binary : a binary built by the bootstrap manifest. eg: minibp
bootstrap_py_binary      : a binary built by the primary manifest. One may be the primary builder.
tool_py_binary           : an auxiliary tool built by the main manifest.

Binaries copy their own sources, and those of every package they transitively depend on,
into a staging directory, then link it into a single executable archive.
"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import logging as logmod
import pathlib as pl

# ##-- end stdlib imports

# ##-- 3rd party imports
from pydantic import Field, field_validator

# ##-- end 3rd party imports

# ##-- 1st party imports
from bootstage._interface import BOOTSTRAP_DIR, MINIBOOTSTRAP_DIR
from bootstage._abstract.module import Module_i
from bootstage._structs.properties import ModuleProperties
from bootstage.bootstrap.config import BootstrapConfig
from bootstage.enums import Stage_e

# ##-- end 1st party imports

# ##-- types
# isort: off
from typing import TYPE_CHECKING, ClassVar, Final

if TYPE_CHECKING:
    from bootstage._structs.module_id import ModuleId
    from bootstage.graph.contexts import ModuleContext
    from bootstage.graph.network import ModuleInfo

# isort: on
# ##-- end types

##-- logging
logging = logmod.getLogger(__name__)
##-- end logging

CP_RULE        : Final[str] = "cp"
COMPILE_RULE   : Final[str] = "pycompile"
LINK_RULE      : Final[str] = "link"
INTERPRETER    : Final[str] = "$toolchainRoot/bin/python3"

def stage_config(ctx:ModuleContext) -> BootstrapConfig:
    match ctx.config:
        case BootstrapConfig() as config:
            return config
        case _:
            return BootstrapConfig()

def declare_rules(ctx:ModuleContext) -> None:
    ctx.rule(CP_RULE, "cp $in $out", description="cp $out")
    ctx.rule(COMPILE_RULE, "$compileCmd $in && touch $out", description="pycompile $out")
    ctx.rule(LINK_RULE, "$linkCmd $stageDir -o $out -m $entry -p $interpreter", description="link $out")

def instance_name(module_id:ModuleId) -> str:
    """ The module name, suffixed with its variant values if it has any """
    return "-".join([module_id.name, *(v for _, v in module_id.variant)])

##--| properties

class PyPackageProperties(ModuleProperties):
    pkg_path      : str
    srcs          : list[str]  = Field(default_factory=list)
    exclude_srcs  : list[str]  = Field(default_factory=list)

    @field_validator("pkg_path")
    def _validate_pkg_path(cls, val):
        if not bool(val.strip()) or val.startswith("/"):
            raise ValueError("pkgPath must be a relative import path", val)
        return val

class PyBinaryProperties(ModuleProperties):
    srcs          : list[str]  = Field(default_factory=list)
    exclude_srcs  : list[str]  = Field(default_factory=list)
    main          : str

    @field_validator("main")
    def _validate_main(cls, val):
        match val.split(":"):
            case [mod, fn] if bool(mod) and bool(fn):
                return val
            case _:
                raise ValueError("main must be of the form 'module:function'", val)

class PrimaryBinaryProperties(PyBinaryProperties):
    primary_builder : bool = False

##--| module types

class PyPackage(Module_i):
    """ A python package: its sources are compiled into a stamp file """

    Properties : ClassVar[type[ModuleProperties]] = PyPackageProperties

    @property
    def pkg_dir(self) -> pl.Path:
        return pl.Path(*self.properties.pkg_path.split("."))

    def sources(self, ctx:ModuleContext, info:None|ModuleInfo=None) -> list[str]:
        directory = None if info is None else info.directory
        return ctx.glob(self.properties.srcs, exclude=self.properties.exclude_srcs, directory=directory)

    def stamp(self, config:BootstrapConfig, name:str) -> str:
        return config.build_path(config.obj_dir, "pkg", "{}.stamp".format(name))

    def generate_build_actions(self, ctx:ModuleContext) -> None:
        config = stage_config(ctx)
        srcs   = self.sources(ctx)
        if not bool(srcs):
            raise ctx.error("Package has no sources matching %s", self.properties.srcs)

        declare_rules(ctx)
        ctx.build(COMPILE_RULE,
                  self.stamp(config, instance_name(ctx.module_id)),
                  [ctx.src_path(x) for x in srcs],
                  implicit=self._dep_stamps(ctx, config))

    def _dep_stamps(self, ctx:ModuleContext, config:BootstrapConfig) -> list[str]:
        stamps = []

        def collect(dep:ModuleInfo) -> None:
            if isinstance(dep.module, PyPackage):
                stamps.append(dep.module.stamp(config, instance_name(dep.module_id)))

        ctx.visit_direct_deps(collect)
        return stamps

class PyBinary(Module_i):
    """ Base for binaries: stage sources, then link.
      'emit_in' is the only stage whose manifest builds the binary,
      'bin_dir' is where it goes, relative to the build dir.
    """

    Properties  : ClassVar[type[ModuleProperties]] = PyBinaryProperties
    emit_in     : ClassVar[Stage_e]
    bin_dir     : ClassVar[str]

    def output(self, config:BootstrapConfig, name:str) -> str:
        return config.build_path(self.bin_dir, name)

    def generate_build_actions(self, ctx:ModuleContext) -> None:
        config = stage_config(ctx)
        if config.stage is not self.emit_in:
            return

        declare_rules(ctx)
        name       = instance_name(ctx.module_id)
        stage_dir  = config.build_path(config.obj_dir, name, "stage")
        staged     = []
        stamps     = []

        for rel in ctx.glob(self.properties.srcs, exclude=self.properties.exclude_srcs):
            staged.append(self._stage(ctx, stage_dir, rel, ctx.src_path(rel)))

        def collect(dep:ModuleInfo) -> None:
            match dep.module:
                case PyPackage() as pkg:
                    stamps.append(pkg.stamp(config, instance_name(dep.module_id)))
                    for rel in pkg.sources(ctx, dep):
                        target = (pkg.pkg_dir / rel).as_posix()
                        staged.append(self._stage(ctx, stage_dir, target, ctx.src_path(rel, directory=dep.directory)))
                case _:
                    pass

        ctx.visit_deps_depth_first(collect)
        if not bool(staged):
            raise ctx.error("Binary has nothing to link")

        ctx.build(LINK_RULE,
                  self.output(config, name),
                  implicit=staged + stamps,
                  variables={"stageDir"    : stage_dir,
                             "entry"       : self.properties.main,
                             "interpreter" : INTERPRETER})

    def _stage(self, ctx:ModuleContext, stage_dir:str, rel:str, src:str) -> str:
        target = "{}/{}".format(stage_dir, rel)
        ctx.build(CP_RULE, target, src)
        return target

class CorePyBinary(PyBinary):
    """ Built by the bootstrap manifest """
    emit_in  = Stage_e.BOOTSTRAP
    bin_dir  = "{}/bin".format(MINIBOOTSTRAP_DIR)

class BootstrapPyBinary(PyBinary):
    """ Built by the primary manifest. May be marked as the primary builder """
    Properties = PrimaryBinaryProperties
    emit_in    = Stage_e.PRIMARY
    bin_dir    = "{}/bin".format(BOOTSTRAP_DIR)

    @property
    def is_primary_builder(self) -> bool:
        return self.properties.primary_builder

class ToolPyBinary(PyBinary):
    """ An auxiliary tool, built by the main manifest and collected under a phony target """
    emit_in  = Stage_e.MAIN
    bin_dir  = "bin"
    is_tool  = True
