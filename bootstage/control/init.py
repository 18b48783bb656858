#!/usr/bin/env python3
"""
Initialises a build directory, so the bootstrap stage can run:

    .minibootstrap/bindings.json  : the bindings, computed once
    .minibootstrap/build.ninja.in : a copy of the source template
    .minibootstrap/build.ninja    : the template, substituted

If the source tree has no template yet, one is generated in process.
"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import logging as logmod
import pathlib as pl

# ##-- end stdlib imports

# ##-- 3rd party imports
from tomlguard import TomlGuard

# ##-- end 3rd party imports

# ##-- 1st party imports
import bootstage._interface as API  # noqa: N812
from bootstage._structs.layout import BuildLayout
from bootstage.bootstrap.main import generate
from bootstage.control.substitution import Bindings, substitute
from bootstage.enums import Stage_e
from bootstage.errors import StageExecutionError
from bootstage.graph.context import Context
from bootstage.utils.files import mtime, write_if_changed

# ##-- end 1st party imports

##-- logging
logging = logmod.getLogger(__name__)
printer = logmod.getLogger(API.PRINTER_NAME)
##-- end logging

def source_template(bindings:Bindings) -> pl.Path:
    return pl.Path(bindings["BootstrapManifest"])

def is_newer(path:pl.Path, than:pl.Path) -> bool:
    """ path exists, and 'than' is either missing or older """
    match mtime(path), mtime(than):
        case None, _:
            return False
        case _, None:
            return True
        case x, y:
            return y < x

def refresh_template(layout:BuildLayout, bindings:Bindings) -> bool:
    """ Copy the source template into the build dir when it is newer, or the copy is missing.
      Returns whether the copy was written.
    """
    source = source_template(bindings)
    match source.is_file(), layout.template.is_file():
        case False, False:
            raise StageExecutionError("No bootstrap template at: %s", str(source), stage=Stage_e.BOOTSTRAP)
        case False, True:
            logging.debug("Source template missing, using: %s", layout.template)
            return False
        case True, True if not is_newer(source, layout.template):
            return False
        case _:
            pass

    logging.info("Copying Template: %s -> %s", source, layout.template)
    return write_if_changed(layout.template, source.read_text())

def refresh_bootstrap_manifest(layout:BuildLayout, bindings:Bindings, *, force:bool=False) -> bool:
    """ Substitute the build dir template into the bootstrap manifest,
      when forced, when the template is newer, or when the manifest is missing.
      Returns whether anything was substituted.
    """
    if not (force or is_newer(layout.template, layout.bootstrap_manifest)):
        return False

    text = substitute(layout.template.read_text(), bindings)
    if write_if_changed(layout.bootstrap_manifest, text, touch=True):
        printer.info("Substituted: %s", layout.bootstrap_manifest)
    return True

def init_build_dir(src_dir:pl.Path, build_dir:pl.Path, *, template:None|pl.Path=None, config:None|TomlGuard=None) -> Bindings:
    """ Compute and save the bindings, ensure a template exists,
      then write the bootstrap manifest.
    """
    config    = config if config is not None else TomlGuard({})
    layout    = BuildLayout.build(build_dir, src_dir, config.on_fail(API.DEFAULT_ROOT_FILE, str).settings.root_file())
    bindings  = Bindings.from_environment(layout.src_dir, layout.build_dir, config, template=template)
    if bindings.save(layout.bindings):
        printer.info("Saved Bindings: %s", layout.bindings)

    source = source_template(bindings)
    if not source.is_file():
        printer.info("No Template found, generating: %s", source)
        generate(Context(workers=config.on_fail(API.DEFAULT_WORKERS, int).settings.load_workers()),
                 root=layout.root,
                 build_dir=layout.build_dir,
                 output=layout.primary_manifest,
                 depfile=layout.primary_depfile,
                 template=source,
                 stage=Stage_e.PRIMARY,
                 config=config)

    refresh_template(layout, bindings)
    refresh_bootstrap_manifest(layout, bindings, force=True)
    return bindings
