#!/usr/bin/env python3
"""
The entry point of generator binaries.

A primary builder registers its own module types and singletons,
then hands over to main, which never returns:

    def run():
        ctx = Context()
        ctx.register_module_type("my_type", MyType)
        bootstrap.main(ctx)

"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import argparse
import logging as logmod
import pathlib as pl
import sys

# ##-- end stdlib imports

# ##-- 3rd party imports
from tomlguard import TomlGuard

# ##-- end 3rd party imports

# ##-- 1st party imports
import bootstage._interface as API  # noqa: N812
from bootstage.bootstrap.config import BootstrapConfig
from bootstage.bootstrap.modules import (BootstrapPyBinary, CorePyBinary, PyPackage,
                                         ToolPyBinary)
from bootstage.bootstrap.singleton import BootstrapSingleton
from bootstage.control.handlers import ErrorHandlers
from bootstage.control.substitution import Bindings
from bootstage.enums import Stage_e
from bootstage.errors import BootstageError
from bootstage.graph.context import Context
from bootstage.loaders.config_loader import load_config
from bootstage.utils.files import write_depfile, write_if_changed
from bootstage.utils.log_config import LogConfig

# ##-- end 1st party imports

# ##-- types
# isort: off
from typing import TYPE_CHECKING, Final, NoReturn

if TYPE_CHECKING:
    from bootstage._structs.manifest import Manifest

# isort: on
# ##-- end types

##-- logging
logging = logmod.getLogger(__name__)
printer = logmod.getLogger(API.PRINTER_NAME)
##-- end logging

MODULE_TYPES : Final[dict[str, type]] = {
    "bootstrap_py_package"     : PyPackage,
    "bootstrap_core_py_binary" : CorePyBinary,
    "bootstrap_py_binary"      : BootstrapPyBinary,
    "tool_py_binary"           : ToolPyBinary,
}
SINGLETON_NAME : Final[str] = "bootstrap"

def register(ctx:Context) -> None:
    """ Register the bootstrap module types and singleton, skipping any already registered """
    for name, factory in MODULE_TYPES.items():
        if not ctx.has_module_type(name):
            ctx.register_module_type(name, factory)

    if not ctx.has_singleton(SINGLETON_NAME):
        ctx.register_singleton(SINGLETON_NAME, BootstrapSingleton)

def stage_bindings(src_dir:pl.Path, build_dir:pl.Path, config:TomlGuard) -> Bindings:
    """ The bindings saved in the build dir by init, otherwise computed fresh """
    saved = Bindings.default_path(build_dir)
    if saved.is_file():
        return Bindings.load(saved).update(SrcDir=str(src_dir.absolute()), BuildDir=str(build_dir.absolute()))

    return Bindings.from_environment(src_dir, build_dir, config)

def generate(ctx:Context, *, root:pl.Path, build_dir:pl.Path, output:pl.Path,
             depfile:None|pl.Path=None,
             template:None|pl.Path=None,
             stage:Stage_e=Stage_e.MAIN,
             config:None|TomlGuard=None) -> Manifest:
    """ Build the manifest for 'stage', and optionally the bootstrap template,
      then write them and the depfile.
      Nothing is written unless every output was generated.
    """
    config    = config if config is not None else TomlGuard({})
    root      = pl.Path(root)
    output    = pl.Path(output)
    depfile   = pl.Path(depfile or "{}{}".format(output, API.DEPFILE_SUFFIX))
    src_dir   = root.absolute().parent
    register(ctx)
    stage_conf = BootstrapConfig(stage=stage,
                                 src_dir=src_dir,
                                 root_file=root.name,
                                 variables=dict(stage_bindings(src_dir, pl.Path(build_dir), config)),
                                 minibp_name=config.on_fail(API.DEFAULT_MINIBP, str).settings.minibp_name(),
                                 tools_target=config.on_fail(API.DEFAULT_TOOLS, str).settings.tools_target())
    template_ctx = ctx.fresh() if template is not None else None
    manifest     = ctx.build(root, stage_conf, require_primary_builder=stage is Stage_e.PRIMARY)
    text         = manifest.render()

    template_text = None
    if template_ctx is not None:
        template_conf = stage_conf.model_copy(update={"stage": Stage_e.BOOTSTRAP,
                                                      "variables": dict(Bindings.placeholders())})
        template_text = template_ctx.build(root, template_conf).render()

    if write_if_changed(output, text, touch=True):
        printer.info("Generated: %s", output)
    build_root = pl.Path(build_dir).absolute()
    walked     = sorted(ctx.dirs_globbed)
    if not src_dir.is_relative_to(build_root):
        walked = [x for x in walked if not x.is_relative_to(build_root)]
    write_depfile(depfile, output.absolute(), [x.absolute() for x in ctx.files_read] + walked)
    if template_text is not None and write_if_changed(pl.Path(template), template_text):
        printer.info("Generated Template: %s", template)

    return manifest

def build_parser(prog:str, *, stage:Stage_e) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=prog, description="Generate the {} manifest".format(stage.name.lower()))
    parser.add_argument("root", type=pl.Path, help="The root build description")
    parser.add_argument("-b", "--build-dir", type=pl.Path, default=pl.Path(), help="The build directory")
    parser.add_argument("-o", "--output", type=pl.Path, required=True, help="The manifest to write")
    parser.add_argument("-d", "--depfile", type=pl.Path, default=None, help="The depfile to write [default: <output>.d]")
    parser.add_argument("-c", "--config", type=pl.Path, default=None, help="The bootstage config")
    parser.add_argument("-v", "--verbose", action="store_true", help="Increase Verbosity")
    if stage is Stage_e.PRIMARY:
        parser.add_argument("-t", "--template", type=pl.Path, default=None, help="Also write the bootstrap template")
    return parser

def main(ctx:Context, *, stage:Stage_e=Stage_e.MAIN, argv:None|list[str]=None) -> NoReturn:
    """ Parse the generator cli, generate, and exit """
    args        = build_parser(pl.Path(sys.argv[0]).name, stage=stage).parse_args(argv)
    log_config  = LogConfig()
    result      = API.ExitCodes.INITIAL
    try:
        config  = load_config(args.root.absolute().parent, explicit=args.config)
        log_config.setup(config, verbose=args.verbose)
        generate(ctx,
                 root=args.root,
                 build_dir=args.build_dir,
                 output=args.output,
                 depfile=args.depfile,
                 template=getattr(args, "template", None),
                 stage=stage,
                 config=config)
        result = API.ExitCodes.SUCCESS
    except (BootstageError, NotImplementedError) as err:
        result = ErrorHandlers().discriminate_exit(err)
    except Exception as err:  # noqa: BLE001
        result = ErrorHandlers().python_exit(err)
    finally:
        sys.exit(result)

def primary_main() -> NoReturn:
    """ A primary builder with only the bootstrap module types """
    main(Context(), stage=Stage_e.MAIN)
