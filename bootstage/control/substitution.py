#!/usr/bin/env python3
"""
Placeholder substitution for manifest templates.

Templates carry tokens of the form @@Key@@, where Key is one of a fixed set.
substitute replaces each token with its binding, in a single pass,
so bound values are never rescanned for tokens.

"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import json
import logging as logmod
import os
import pathlib as pl
import re
import shutil
import sys
from collections.abc import Mapping

# ##-- end stdlib imports

# ##-- 3rd party imports
from tomlguard import TomlGuard

# ##-- end 3rd party imports

# ##-- 1st party imports
from bootstage._interface import (MINIBOOTSTRAP_DIR, BINDINGS_NAME, PLACEHOLDER_KEYS,
                                  TEMPLATE_NAME)
from bootstage.errors import (MissingBindingError, SubstitutionError,
                              UnknownTokenError)
from bootstage.utils.files import write_if_changed

# ##-- end 1st party imports

# ##-- types
# isort: off
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterator

# isort: on
# ##-- end types

##-- logging
logging = logmod.getLogger(__name__)
##-- end logging

TOKEN_RE      : Final[re.Pattern]  = re.compile(r"@@(\w+)@@")
ANY_TOKEN_RE  : Final[re.Pattern]  = re.compile(r"@@([^@\s]*)@@")
ENV_ROOT      : Final[str]         = "BOOTSTAGE_TOOLCHAIN_ROOT"
ENV_COMPILE   : Final[str]         = "BOOTSTAGE_COMPILE"
ENV_LINK      : Final[str]         = "BOOTSTAGE_LINK"

def token(key:str) -> str:
    return "@@{}@@".format(key)

class Bindings(Mapping):
    """ An immutable placeholder key -> value mapping.
      Keys are restricted to the recognized placeholder keys.
    """

    def __init__(self, values:None|Mapping[str, str]=None, **kwargs:str):
        data = dict(values or {})
        data.update(kwargs)
        for key in data:
            if key not in PLACEHOLDER_KEYS:
                raise UnknownTokenError("Unrecognized binding key: %s", key, token=key)

        self._data : dict[str, str] = {k: str(v) for k, v in data.items()}

    def __getitem__(self, key:str) -> str:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return "<Bindings: {}>".format(self._data)

    def update(self, **kwargs:str) -> Bindings:
        """ A new binding set, with some values replaced """
        data = dict(self._data)
        data.update(kwargs)
        return Bindings(data)

    @staticmethod
    def placeholders() -> Bindings:
        """ Every key bound to its own token, for emitting templates """
        return Bindings({x: token(x) for x in PLACEHOLDER_KEYS})

    @staticmethod
    def from_environment(src_dir:pl.Path, build_dir:pl.Path, config:None|TomlGuard=None, *, template:None|pl.Path=None) -> Bindings:
        """ Compute concrete bindings from config, the environment, and the running interpreter """
        config     = config if config is not None else TomlGuard({})
        src_dir    = pl.Path(src_dir).absolute()
        build_dir  = pl.Path(build_dir).absolute()
        python     = sys.executable
        match template:
            case None:
                template = src_dir / config.on_fail(TEMPLATE_NAME, str).settings.template()
            case _:
                template = pl.Path(template)

        match shutil.which("bootstage"):
            case None:
                bootstrap = "{} -m bootstage".format(python)
            case found:
                bootstrap = found

        return Bindings({
            "SrcDir"            : str(src_dir),
            "BuildDir"          : str(build_dir),
            "GoRoot"            : os.environ.get(ENV_ROOT, config.on_fail(sys.prefix, str).toolchain.root()),
            "GoCompile"         : os.environ.get(ENV_COMPILE, config.on_fail("{} -m py_compile".format(python), str).toolchain.compile()),
            "GoLink"            : os.environ.get(ENV_LINK, config.on_fail("{} -m zipapp".format(python), str).toolchain.link()),
            "Bootstrap"         : bootstrap,
            "BootstrapManifest" : str(template.absolute()),
            })

    @staticmethod
    def default_path(build_dir:pl.Path) -> pl.Path:
        return pl.Path(build_dir) / MINIBOOTSTRAP_DIR / BINDINGS_NAME

    @staticmethod
    def load(path:pl.Path) -> Bindings:
        try:
            data = json.loads(pl.Path(path).read_text())
        except OSError as err:
            raise SubstitutionError("Failed to read bindings: %s", str(err)) from err
        except json.JSONDecodeError as err:
            raise SubstitutionError("Malformed bindings file %s: %s", str(path), str(err)) from err

        match data:
            case dict():
                return Bindings(data)
            case _:
                raise SubstitutionError("Bindings file is not a table: %s", str(path))

    def save(self, path:pl.Path) -> bool:
        text = json.dumps(self._data, indent=4, sort_keys=True) + "\n"
        return write_if_changed(pl.Path(path), text)

def tokens(template:str) -> list[str]:
    """ The distinct placeholder keys a template references, in order of appearance """
    found = []
    for key in TOKEN_RE.findall(template):
        if key not in found:
            found.append(key)
    return found

def substitute(template:str, bindings:Mapping[str, str]) -> str:
    """ Replace every @@Key@@ token in the template with its binding.

      Raises UnknownTokenError on unrecognized keys,
      and MissingBindingError listing every recognized key without a binding.
      Bindings the template does not use are ignored.
    """
    for key in ANY_TOKEN_RE.findall(template):
        if not TOKEN_RE.fullmatch(token(key)):
            raise UnknownTokenError("Malformed placeholder token: %s", token(key), token=key)

    referenced = tokens(template)
    for key in referenced:
        if key not in PLACEHOLDER_KEYS:
            raise UnknownTokenError("Unrecognized placeholder token: %s", token(key), token=key)

    missing = [x for x in referenced if x not in bindings]
    if bool(missing):
        raise MissingBindingError("No binding for placeholders: %s", ", ".join(sorted(missing)), missing=missing)

    result = TOKEN_RE.sub(lambda m: str(bindings[m[1]]), template)

    if bool(leftover:=[token(x) for x in ANY_TOKEN_RE.findall(result)]):
        raise SubstitutionError("Placeholders survived substitution: %s", ", ".join(leftover))

    return result
