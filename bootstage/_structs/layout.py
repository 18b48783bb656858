#!/usr/bin/env python3
"""
The fixed file layout of a build directory.
"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import logging as logmod
import pathlib as pl
from dataclasses import dataclass

# ##-- end stdlib imports

# ##-- 1st party imports
from bootstage._interface import (BINDINGS_NAME, BOOTSTRAP_DIR, DEFAULT_ROOT_FILE,
                                  DEPFILE_SUFFIX, MANIFEST_NAME, MINIBOOTSTRAP_DIR,
                                  TEMPLATE_NAME)

# ##-- end 1st party imports

##-- logging
logging = logmod.getLogger(__name__)
##-- end logging

@dataclass(frozen=True)
class BuildLayout:
    """
      .minibootstrap/build.ninja     : the bootstrap manifest, substituted from the template
      .minibootstrap/build.ninja.in  : the template in use, and the regenerated candidate
      .minibootstrap/bindings.json   : the placeholder bindings init computed
      .bootstrap/build.ninja         : the primary manifest
      build.ninja                    : the main manifest
    """
    build_dir  : pl.Path
    src_dir    : pl.Path
    root_file  : str      = DEFAULT_ROOT_FILE

    @staticmethod
    def build(build_dir:pl.Path, src_dir:pl.Path, root_file:str=DEFAULT_ROOT_FILE) -> BuildLayout:
        return BuildLayout(pl.Path(build_dir).absolute(), pl.Path(src_dir).absolute(), root_file)

    @property
    def root(self) -> pl.Path:
        return self.src_dir / self.root_file

    @property
    def bootstrap_manifest(self) -> pl.Path:
        return self.build_dir / MINIBOOTSTRAP_DIR / MANIFEST_NAME

    @property
    def template(self) -> pl.Path:
        return self.build_dir / MINIBOOTSTRAP_DIR / TEMPLATE_NAME

    @property
    def bindings(self) -> pl.Path:
        return self.build_dir / MINIBOOTSTRAP_DIR / BINDINGS_NAME

    @property
    def primary_manifest(self) -> pl.Path:
        return self.build_dir / BOOTSTRAP_DIR / MANIFEST_NAME

    @property
    def primary_depfile(self) -> pl.Path:
        return self.build_dir / BOOTSTRAP_DIR / (MANIFEST_NAME + DEPFILE_SUFFIX)

    @property
    def main_manifest(self) -> pl.Path:
        return self.build_dir / MANIFEST_NAME

    @property
    def main_depfile(self) -> pl.Path:
        return self.build_dir / (MANIFEST_NAME + DEPFILE_SUFFIX)
