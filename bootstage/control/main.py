#!/usr/bin/env python3
"""
The bootstage cli.

    bootstage init   : compute bindings and write the bootstrap manifest into a build dir
    bootstage build  : run the bootstrap, primary, and main stages
    bootstage minibp : the canonical generator, as used by the bootstrap manifest

"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import argparse
import logging as logmod
import pathlib as pl
import sys
from bdb import BdbQuit

# ##-- end stdlib imports

# ##-- 3rd party imports
from tomlguard import TomlGuard

# ##-- end 3rd party imports

# ##-- 1st party imports
import bootstage._interface as API  # noqa: N812
import bootstage.errors as berrs
from bootstage._structs.layout import BuildLayout
from bootstage.control.engine import NinjaEngine
from bootstage.control.generators import CanonicalGenerator, EngineTargetGenerator
from bootstage.control.handlers import ErrorHandlers
from bootstage.control.init import init_build_dir
from bootstage.control.orchestrator import Orchestrator
from bootstage.control.substitution import Bindings
from bootstage.enums import Stage_e
from bootstage.loaders.config_loader import load_config
from bootstage.minibp import main as minibp_main
from bootstage.utils.log_config import LogConfig

# ##-- end 1st party imports

# ##-- types
# isort: off
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from typing import Final, NoReturn

# isort: on
# ##-- end types

##-- logging
logging = logmod.getLogger(__name__)
printer = logmod.getLogger(API.PRINTER_NAME)
##-- end logging

# Vars:
PROG_NAME  : Final[str] = "bootstage"

##--| controllers

class CLIController:
    """ mixin for cli arg processing """

    def build_parser(self, obj:BootstageMain) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(prog=obj.prog_name, description="A self-hosting ninja manifest generator",
                                         epilog="{} minibp ... runs the canonical generator".format(obj.prog_name))
        parser.add_argument("--version", action="version", version="%(prog)s {}".format(API.__version__))
        parser.add_argument("-v", "--verbose", action="store_true", help="Increase Verbosity")
        subs = parser.add_subparsers(dest="cmd", required=True)

        init = subs.add_parser("init", help="Initialise a build directory")
        init.add_argument("-s", "--src-dir", type=pl.Path, default=pl.Path(), help="The source tree")
        init.add_argument("-b", "--build-dir", type=pl.Path, default=pl.Path(), help="The build directory")
        init.add_argument("-i", "--template", type=pl.Path, default=None, help="The bootstrap template [default: <src>/build.ninja.in]")
        init.add_argument("-c", "--config", type=pl.Path, default=None, help="The bootstage config")

        build = subs.add_parser("build", help="Run every stage, then build targets")
        build.add_argument("-b", "--build-dir", type=pl.Path, default=pl.Path(), help="The build directory")
        build.add_argument("-c", "--config", type=pl.Path, default=None, help="The bootstage config")
        build.add_argument("targets", nargs="*", help="Targets of the main manifest")

        return parser

    def parse_args(self, obj:BootstageMain) -> argparse.Namespace:
        return self.build_parser(obj).parse_args(obj.raw_args[1:])

class CmdController:
    """ mixin for running the parsed command """

    def run_cmd(self, obj:BootstageMain) -> int:
        match obj.args.cmd:
            case "init":
                return self.init(obj)
            case "build":
                return self.build(obj)
            case x:
                raise berrs.EarlyExit("Unrecognised command", x)

    def init(self, obj:BootstageMain) -> int:
        config    = self._config(obj, obj.args.src_dir)
        bindings  = init_build_dir(obj.args.src_dir,
                                   obj.args.build_dir,
                                   template=obj.args.template,
                                   config=config)
        printer.info("Initialised: %s", bindings["BuildDir"])
        return API.ExitCodes.SUCCESS

    def build(self, obj:BootstageMain) -> int:
        layout     = BuildLayout.build(obj.args.build_dir, pl.Path())
        if not layout.bindings.is_file():
            raise berrs.StageExecutionError("Build directory is not initialised, run 'bootstage init': %s", str(layout.build_dir),
                                            stage=Stage_e.BOOTSTRAP)
        bindings   = Bindings.load(layout.bindings)
        src_dir    = pl.Path(bindings["SrcDir"])
        config     = self._config(obj, src_dir)
        layout     = BuildLayout.build(layout.build_dir, src_dir, config.on_fail(API.DEFAULT_ROOT_FILE, str).settings.root_file())
        engine     = NinjaEngine.from_config(layout.build_dir, config)
        generators = {
            Stage_e.BOOTSTRAP : CanonicalGenerator(layout, config=config),
            Stage_e.PRIMARY   : EngineTargetGenerator.primary_builder(engine, layout),
        }
        orch = Orchestrator(layout,
                            engine,
                            generators,
                            bindings=bindings,
                            max_restarts=config.on_fail(API.DEFAULT_RESTARTS, int).settings.max_bootstrap_restarts())
        report = orch.run(obj.args.targets)
        printer.info("Stages: %s", ", ".join(x.name for x in report.stages))
        printer.info("Regenerated: %s, Restarts: %s", ", ".join(report.regenerations) or "nothing", report.restarts)
        return API.ExitCodes.SUCCESS

    def _config(self, obj:BootstageMain, src_dir:pl.Path) -> TomlGuard:
        config = load_config(src_dir, explicit=obj.args.config)
        obj.log_config.setup(config, verbose=obj.args.verbose)
        return config

##--|

class BootstageMain:
    """ bootstage.main and the associated exit handlers.

    Catches bootstage errors, then NotImplementedError, then Exception,
    and always ends with sys.exit
    """
    _cli   : ClassVar[CLIController]  = CLIController()
    _cmd   : ClassVar[CmdController]  = CmdController()
    _err   : ClassVar[ErrorHandlers]  = ErrorHandlers()

    def __init__(self, *, cli_args:None|list[str]=None) -> None:
        match cli_args:
            case None:
                self.raw_args = sys.argv[:]
            case list() as vals:
                self.raw_args = vals
            case x:
                raise TypeError(type(x))

        self.result_code  = API.ExitCodes.INITIAL
        self.prog_name    = PROG_NAME
        self.args         = None
        self.log_config   = LogConfig()

    def __call__(self) -> NoReturn:
        match self.raw_args:
            case [_, "minibp", *rest]:
                minibp_main(rest)
            case _:
                pass

        self.args = self._cli.parse_args(self)

        if self.args.verbose:
            self.log_config.set_level(logmod.DEBUG)

        try:
            self.result_code = self._cmd.run_cmd(self)
        except (berrs.BootstageError, berrs.EarlyExit, BdbQuit, NotImplementedError) as err:
            self.result_code = self._err.discriminate_exit(err)
        except Exception as err:  # noqa: BLE001
            self.result_code = self._err.python_exit(err)
        finally:
            logging.info("Shutting Down Bootstage")
            sys.exit(self.result_code)
