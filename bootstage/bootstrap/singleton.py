#!/usr/bin/env python3
"""
The bootstrap singleton: the global variables,
and the generator rule that keeps the next stage's manifest up to date.
"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import logging as logmod

# ##-- end stdlib imports

# ##-- 1st party imports
from bootstage._interface import BOOTSTRAP_DIR, DEPFILE_SUFFIX, MANIFEST_NAME
from bootstage.bootstrap.config import BootstrapConfig
from bootstage.bootstrap.modules import (BootstrapPyBinary, CorePyBinary, PyBinary,
                                         instance_name)
from bootstage.enums import Stage_e

# ##-- end 1st party imports

# ##-- types
# isort: off
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from bootstage.graph.contexts import SingletonContext
    from bootstage.graph.network import ModuleInfo

# isort: on
# ##-- end types

##-- logging
logging = logmod.getLogger(__name__)
##-- end logging

MINIBP_RULE   : Final[str] = "minibp"
PRIMARY_RULE  : Final[str] = "primary_builder"

class BootstrapSingleton:
    """
      Bootstrap template : runs minibp to generate the primary manifest and the template.
      Primary manifest   : runs the primary builder to generate the main manifest.
      Main manifest      : a phony target over every tool.
    """

    def generate_build_actions(self, ctx:SingletonContext) -> None:
        match ctx.config:
            case BootstrapConfig() as config:
                pass
            case _:
                config = BootstrapConfig()

        for name, value in config.ninja_variables:
            ctx.set_variable(name, value)

        match config.stage:
            case Stage_e.BOOTSTRAP:
                self._minibp(ctx, config)
            case Stage_e.PRIMARY:
                self._primary_builder(ctx, config)
            case Stage_e.MAIN:
                self._tools(ctx, config)

    def _minibp(self, ctx:SingletonContext, config:BootstrapConfig) -> None:
        found = []

        def collect(info:ModuleInfo) -> None:
            if isinstance(info.module, CorePyBinary) and info.name == config.minibp_name:
                found.append(info)

        ctx.visit_all_modules(collect)
        match found:
            case [info]:
                pass
            case []:
                raise ctx.error("The bootstrap manifest needs a bootstrap_core_py_binary named '%s'", config.minibp_name)
            case _:
                raise ctx.error("'%s' cannot have variants", config.minibp_name)

        minibp   = info.module.output(config, instance_name(info.module_id))
        output   = config.build_path(BOOTSTRAP_DIR, MANIFEST_NAME)
        ctx.rule(MINIBP_RULE,
                 "$minibp $in -b $buildDir -o $out -d $out{} -t $template".format(DEPFILE_SUFFIX),
                 description="minibp $out",
                 depfile="$out{}".format(DEPFILE_SUFFIX),
                 generator=True)
        ctx.build(MINIBP_RULE,
                  output,
                  config.root_path,
                  implicit=[minibp],
                  implicit_outputs=[config.template_path],
                  variables={"minibp": minibp, "template": config.template_path})
        ctx.add_default(output)

    def _primary_builder(self, ctx:SingletonContext, config:BootstrapConfig) -> None:
        match ctx.primary_builder():
            case None:
                logging.warning("No primary builder, %s will not be generated", MANIFEST_NAME)
                return
            case info if isinstance(info.module, BootstrapPyBinary):
                pass
            case info:
                raise ctx.error("The primary builder %s must be a bootstrap_py_binary", info.module_id)

        builder  = info.module.output(config, instance_name(info.module_id))
        output   = config.build_path(MANIFEST_NAME)
        ctx.rule(PRIMARY_RULE,
                 "$builder $in -b $buildDir -o $out -d $out{}".format(DEPFILE_SUFFIX),
                 description="primary builder $out",
                 depfile="$out{}".format(DEPFILE_SUFFIX),
                 generator=True)
        ctx.build(PRIMARY_RULE,
                  output,
                  config.root_path,
                  implicit=[builder],
                  variables={"builder": builder})
        ctx.add_default(output)

    def _tools(self, ctx:SingletonContext, config:BootstrapConfig) -> None:
        tools = []

        def collect(info:ModuleInfo) -> None:
            if not info.is_tool:
                return
            match info.module:
                case PyBinary() as binary:
                    tools.append(binary.output(config, instance_name(info.module_id)))
                case _:
                    tools.extend(ctx.outputs_of(info))

        ctx.visit_all_modules(collect)
        ctx.phony(config.tools_target, tools)
