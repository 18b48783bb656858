#!/usr/bin/env python3
"""
The config passed through a graph build to the bootstrap module types and singleton.
"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import logging as logmod
import pathlib as pl

# ##-- end stdlib imports

# ##-- 3rd party imports
from pydantic import BaseModel, ConfigDict, Field, field_validator

# ##-- end 3rd party imports

# ##-- 1st party imports
from bootstage._interface import (BOOTSTRAP_DIR, DEFAULT_MINIBP, DEFAULT_ROOT_FILE,
                                  DEFAULT_TOOLS, MAIN_OBJ_DIR, MINIBOOTSTRAP_DIR,
                                  PLACEHOLDER_KEYS, TEMPLATE_NAME, VARIABLE_NAMES)
from bootstage.enums import Stage_e

# ##-- end 1st party imports

##-- logging
logging = logmod.getLogger(__name__)
##-- end logging

class BootstrapConfig(BaseModel):
    """
      stage     : the stage whose manifest is being generated.
      variables : binding key -> value, emitted as the global ninja variables.
                  When generating the bootstrap template, these are the placeholder tokens.
    """
    model_config = ConfigDict(frozen=True)

    stage         : Stage_e          = Stage_e.MAIN
    src_dir       : pl.Path          = Field(default_factory=pl.Path.cwd)
    root_file     : str              = DEFAULT_ROOT_FILE
    variables     : dict[str, str]   = Field(default_factory=dict)
    minibp_name   : str              = DEFAULT_MINIBP
    tools_target  : str              = DEFAULT_TOOLS

    @field_validator("stage")
    def _validate_stage(cls, val):
        if val not in Stage_e.pipeline():
            raise ValueError("Not a pipeline stage", val)
        return val

    @field_validator("variables")
    def _validate_variables(cls, val):
        if bool(unknown:=set(val.keys()) - set(PLACEHOLDER_KEYS)):
            raise ValueError("Unknown binding keys", sorted(unknown))
        return val

    @property
    def obj_dir(self) -> str:
        """ Where this stage's intermediate outputs go, relative to the build dir """
        match self.stage:
            case Stage_e.BOOTSTRAP:
                return MINIBOOTSTRAP_DIR
            case Stage_e.PRIMARY:
                return BOOTSTRAP_DIR
            case _:
                return MAIN_OBJ_DIR

    @property
    def ninja_variables(self) -> list[tuple[str, str]]:
        """ (ninja name, value) for every binding, in placeholder order """
        return [(VARIABLE_NAMES[x], self.variables.get(x, "")) for x in PLACEHOLDER_KEYS]

    def build_path(self, *parts:str) -> str:
        return "/".join(["$buildDir", *parts])

    @property
    def root_path(self) -> str:
        return "$srcDir/{}".format(self.root_file)

    @property
    def template_path(self) -> str:
        return self.build_path(MINIBOOTSTRAP_DIR, TEMPLATE_NAME)
