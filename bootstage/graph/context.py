#!/usr/bin/env python3
"""
The Module Graph Builder.

Usage::

    ctx = Context()
    ctx.register_module_type("bootstrap_py_package", PyPackage)
    ctx.register_singleton("bootstrap", BootstrapSingleton)
    manifest = ctx.build("Blueprints.toml")

A Context is single use. To build again with the same registrations, use ctx.fresh()
"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import logging as logmod
import pathlib as pl
import threading

# ##-- end stdlib imports

# ##-- 3rd party imports
from pydantic import ValidationError

# ##-- end 3rd party imports

# ##-- 1st party imports
from bootstage._interface import DEFAULT_WORKERS
from bootstage._structs.manifest import Manifest
from bootstage._structs.module_id import ModuleId, expand_variants
from bootstage._structs.properties import ModuleProperties
from bootstage.errors import (BootstageError, BuildDescriptionError,
                              DuplicateModuleTypeError, DuplicateSingletonError,
                              RegistrationError, UnknownModuleTypeError)
from bootstage.graph.contexts import ModuleContext, SingletonContext
from bootstage.graph.loader import DescriptionLoader
from bootstage.graph.network import ModuleInfo, ModuleNetwork
from bootstage.graph.registry import Registry

# ##-- end 1st party imports

# ##-- types
# isort: off
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable
    from bootstage._abstract.module import Module_p, Singleton_p
    from bootstage.graph.loader import Declaration

# isort: on
# ##-- end types

##-- logging
logging = logmod.getLogger(__name__)
##-- end logging

class Context:
    """ Registries of module types and singletons, and a single graph build using them """

    def __init__(self, *, workers:int=DEFAULT_WORKERS, _module_types:None|Registry=None, _singletons:None|Registry=None):
        self._module_types  : Registry            = _module_types if _module_types is not None else Registry("module type", dup_error=DuplicateModuleTypeError)
        self._singletons    : Registry            = _singletons if _singletons is not None else Registry("singleton", dup_error=DuplicateSingletonError)
        self._lock          : threading.RLock     = threading.RLock()
        self._built         : bool                = False
        self.workers        : int                 = workers
        self.files_read     : list[pl.Path]       = []
        self.dirs_globbed   : set[pl.Path]        = set()
        self.network        : None|ModuleNetwork  = None

    def register_module_type(self, name:str, factory:Callable[[ModuleProperties], Module_p]) -> None:
        self._module_types.register(name, factory)

    def register_singleton(self, name:str, factory:Callable[[], Singleton_p]) -> None:
        self._singletons.register(name, factory)

    def has_module_type(self, name:str) -> bool:
        return name in self._module_types

    def has_singleton(self, name:str) -> bool:
        return name in self._singletons

    def fresh(self) -> Context:
        """ A new, unbuilt, context with the same registrations """
        return Context(workers=self.workers,
                       _module_types=self._module_types.copy(),
                       _singletons=self._singletons.copy())

    def build(self, root:pl.Path|str, config:Any=None, *, require_primary_builder:bool=False) -> Manifest:
        """ Load the description tree at 'root', build the module network,
          validate it, and emit every module's and singleton's build actions.
        """
        with self._lock:
            if self._built:
                raise RegistrationError("This Context has already been built, use Context.fresh()")
            self._built = True
            self._module_types.freeze()
            self._singletons.freeze()

        root             = pl.Path(root)
        loaded           = DescriptionLoader(root, workers=self.workers).load()
        self.files_read  = loaded.files
        self.network     = ModuleNetwork()

        for decl in loaded.declarations:
            self._instantiate(decl)

        logging.info("Module Network: %s instances", len(self.network))
        self.network.connect_all()
        self.network.validate(require_primary_builder=require_primary_builder)

        manifest = Manifest()
        src_root = root.absolute().parent
        for node in self.network.emission_order():
            info = self.network.info(node)
            logging.debug("Emitting: %s", node)
            mod_ctx = ModuleContext(info=info, network=self.network, manifest=manifest, src_root=src_root, config=config, dirs=self.dirs_globbed)
            try:
                info.module.generate_build_actions(mod_ctx)
            except BootstageError as err:
                if err.location is None:
                    err.location = info.location
                raise

        for name, factory in self._singletons.items():
            logging.debug("Emitting Singleton: %s", name)
            single_ctx = SingletonContext(name=name, network=self.network, manifest=manifest, config=config)
            factory().generate_build_actions(single_ctx)

        return manifest

    def _instantiate(self, decl:Declaration) -> None:
        factory = self._module_types.get(decl.type_name)
        if factory is None:
            raise UnknownModuleTypeError("Unknown module type: %s", decl.type_name, location=decl.location)

        props_cls  = getattr(factory, "Properties", ModuleProperties)
        try:
            properties = props_cls.model_validate(decl.data)
        except ValidationError as err:
            details = "; ".join("{}: {}".format(".".join(str(x) for x in e['loc']), e['msg']) for e in err.errors())
            raise BuildDescriptionError("Invalid properties: %s", details, location=decl.location) from err

        variants = expand_variants(properties.variants)
        self.network.declare(properties.name, set(properties.variants.keys()), decl.location)
        for variant in variants:
            module_id = ModuleId(properties.name, variant)
            self.network.add(ModuleInfo(module_id=module_id,
                                        type_name=decl.type_name,
                                        module=factory(properties),
                                        properties=properties,
                                        location=decl.location,
                                        directory=decl.directory))
