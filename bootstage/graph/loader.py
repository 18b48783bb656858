#!/usr/bin/env python3
"""
Loads a tree of build description files.

The root file, and every file reached through 'subdirs', is parsed with tomlguard.
Each level of the tree is parsed in a thread pool,
then merged in declaration order so the result does not depend on scheduling.

Every top level key other than 'subdirs' is a module type,
holding either one table, or an array of tables:

subdirs = ["lib", "tools/*"]

[[bootstrap_py_package]]
name = "example"
srcs = ["*.py"]

"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import logging as logmod
import pathlib as pl
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

# ##-- end stdlib imports

# ##-- 3rd party imports
import more_itertools as mitz
import tomlguard

# ##-- end 3rd party imports

# ##-- 1st party imports
from bootstage._interface import DEFAULT_WORKERS, SUBDIRS_KEY
from bootstage._structs.location import SourceLocation
from bootstage.errors import BuildDescriptionError

# ##-- end 1st party imports

# ##-- types
# isort: off
from typing import TYPE_CHECKING, Any, Final

# isort: on
# ##-- end types

##-- logging
logging = logmod.getLogger(__name__)
##-- end logging

GLOB_CHARS : Final[frozenset[str]] = frozenset("*?[")

@dataclass(frozen=True)
class Declaration:
    """ The raw property bag of a single module declaration """
    type_name  : str
    data       : dict
    location   : SourceLocation
    directory  : pl.Path

@dataclass
class LoadResult:
    files         : list[pl.Path]      = field(default_factory=list)
    declarations  : list[Declaration]  = field(default_factory=list)

class DescriptionLoader:
    """ Reads the root description and everything it transitively includes.
      Locations are reported relative to the directory of the root file.
    """

    def __init__(self, root:pl.Path, *, workers:int=DEFAULT_WORKERS):
        self.root      : pl.Path = pl.Path(root).resolve()
        self.base      : pl.Path = self.root.parent
        self.filename  : str     = self.root.name
        self.workers   : int     = max(1, workers)

    def load(self) -> LoadResult:
        if not self.root.is_file():
            raise BuildDescriptionError("Root build description does not exist: %s", str(self.root))

        result                  = LoadResult()
        seen   : set[pl.Path]   = {self.root}
        level  : list[pl.Path]  = [self.root]
        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            while bool(level):
                logging.debug("Parsing %s description files", len(level))
                parsed     = list(pool.map(self._parse, level))
                next_level = []
                for path, data in zip(level, parsed, strict=True):
                    result.files.append(path)
                    result.declarations += self._declarations(path, data)
                    for sub in self._subdirs(path, data):
                        if sub in seen:
                            continue
                        seen.add(sub)
                        next_level.append(sub)

                level = next_level

        logging.info("Loaded %s declarations from %s files", len(result.declarations), len(result.files))
        return result

    def relative(self, path:pl.Path) -> pl.Path:
        try:
            return path.relative_to(self.base)
        except ValueError:
            return path

    def _parse(self, path:pl.Path) -> dict:
        try:
            data = tomlguard.read(path.read_text())
        except OSError as err:
            raise BuildDescriptionError("Failed to read build description: %s", str(err), location=SourceLocation(self.relative(path))) from err
        except ValueError as err:
            raise BuildDescriptionError("Malformed build description: %s", str(err), location=SourceLocation(self.relative(path))) from err

        return data._table()

    def _subdirs(self, path:pl.Path, data:dict) -> list[pl.Path]:
        location = SourceLocation(self.relative(path), SUBDIRS_KEY)
        match data.get(SUBDIRS_KEY, []):
            case [*xs] if all(isinstance(x, str) for x in xs):
                entries = xs
            case _:
                raise BuildDescriptionError("'%s' must be a list of strings", SUBDIRS_KEY, location=location)

        found = []
        for entry in entries:
            match GLOB_CHARS & set(entry):
                case frozenset() as chars if bool(chars):
                    matches = sorted(path.parent.glob(entry))
                    found  += [x / self.filename for x in matches if (x / self.filename).is_file()]
                case _:
                    target = path.parent / entry / self.filename
                    if not target.is_file():
                        raise BuildDescriptionError("Subdir has no %s: %s", self.filename, entry, location=location)
                    found.append(target)

        return list(mitz.unique_everseen(x.resolve() for x in found))

    def _declarations(self, path:pl.Path, data:dict) -> list[Declaration]:
        rel_path   = self.relative(path)
        directory  = rel_path.parent
        decls      = []
        for type_name, val in data.items():
            if type_name == SUBDIRS_KEY:
                continue

            match val:
                case dict():
                    entries = [val]
                case [*xs] if all(isinstance(x, dict) for x in xs):
                    entries = xs
                case _:
                    raise BuildDescriptionError("Module declarations must be tables",
                                                location=SourceLocation(rel_path, type_name))

            for i, entry in enumerate(entries):
                location = SourceLocation(rel_path, "{}[{}]".format(type_name, i))
                decls.append(Declaration(type_name, dict(entry), location, directory))

        return decls
