#!/usr/bin/env python3
"""
Constants shared across bootstage:
file layout of the build directory, placeholder keys,
config prefixes and process exit codes.

"""
# ruff: noqa:

# Imports:
from __future__ import annotations

# ##-- stdlib imports
import enum
import logging as logmod
from importlib.metadata import version
# ##-- end stdlib imports

# ##-- types
# isort: off
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Final

# isort: on
# ##-- end types

##-- logging
logging = logmod.getLogger(__name__)
##-- end logging

# Vars:
__version__ : Final[str] = version("bootstage")

# -- placeholders
PLACEHOLDER_KEYS   : Final[tuple[str, ...]]    = ("SrcDir",
                                                  "BuildDir",
                                                  "GoRoot",
                                                  "GoCompile",
                                                  "GoLink",
                                                  "Bootstrap",
                                                  "BootstrapManifest",
                                                  )
# binding key -> ninja variable name
VARIABLE_NAMES     : Final[dict[str, str]]      = {
    "SrcDir"            : "srcDir",
    "BuildDir"          : "buildDir",
    "GoRoot"            : "toolchainRoot",
    "GoCompile"         : "compileCmd",
    "GoLink"            : "linkCmd",
    "Bootstrap"         : "bootstrapCmd",
    "BootstrapManifest" : "bootstrapManifest",
}

# -- build dir layout
MINIBOOTSTRAP_DIR  : Final[str]                = ".minibootstrap"
BOOTSTRAP_DIR      : Final[str]                = ".bootstrap"
MAIN_OBJ_DIR       : Final[str]                = ".bootstage"
MANIFEST_NAME      : Final[str]                = "build.ninja"
TEMPLATE_NAME      : Final[str]                = "build.ninja.in"
BINDINGS_NAME      : Final[str]                = "bindings.json"
DEPFILE_SUFFIX     : Final[str]                = ".d"

# -- source tree defaults
DEFAULT_ROOT_FILE  : Final[str]                = "Blueprints.toml"
SUBDIRS_KEY        : Final[str]                = "subdirs"
DEFAULT_MINIBP     : Final[str]                = "minibp"
DEFAULT_TOOLS      : Final[str]                = "bootstage_tools"
DEFAULT_RESTARTS   : Final[int]                = 1
DEFAULT_WORKERS    : Final[int]                = 4
NINJA_VERSION      : Final[str]                = "1.7.0"

# -- config
BOOTSTAGE_TOML     : Final[str]                = "bootstage.toml"
PYPROJ_TOML        : Final[str]                = "pyproject.toml"
TOOL_PREFIX        : Final[str]                = "tool.bootstage"
PRINTER_NAME       : Final[str]                = "bootstage._printer"
LASTERR            : Final[str]                = ".bootstage.lasterror"

##--|
class ExitCodes(enum.IntEnum):
    SUCCESS          = 0
    UNKNOWN_FAIL     = -1
    EARLY            = -3
    MISSING_CONFIG   = -4
    BAD_CONFIG       = -5
    BAD_SUBSTITUTION = -6
    BAD_DESCRIPTION  = -7
    BAD_GRAPH        = -8
    STAGE_FAIL       = -9
    NO_CONVERGENCE   = -10
    BOOTSTAGE_FAIL   = -13
    NOT_IMPLEMENTED  = -14
    PYTHON_FAIL      = -16

    INITIAL          = -99
