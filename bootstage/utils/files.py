#!/usr/bin/env python3
"""
File utilities for generated outputs:
atomic 'write if changed', Makefile style depfiles, and mtime staleness.

"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import logging as logmod
import os
import pathlib as pl
import re

# ##-- end stdlib imports

# ##-- 3rd party imports
from boltons.fileutils import atomic_save

# ##-- end 3rd party imports

# ##-- types
# isort: off
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterable

# isort: on
# ##-- end types

##-- logging
logging = logmod.getLogger(__name__)
##-- end logging

DEP_SPLIT_RE : Final[re.Pattern] = re.compile(r"(?<!\\)\s+")

def write_if_changed(path:pl.Path, text:str, *, touch:bool=False) -> bool:
    """ Atomically write text to path, only if its content differs.
      When unchanged and 'touch' is set, the mtime is updated instead.
      Returns whether the content was written.
    """
    path = pl.Path(path)
    if path.is_file() and path.read_text() == text:
        logging.debug("Unchanged: %s", path)
        if touch:
            os.utime(path)
        return False

    path.parent.mkdir(parents=True, exist_ok=True)
    with atomic_save(str(path)) as f:
        f.write(text.encode())

    logging.debug("Wrote: %s", path)
    return True

def _escape_dep(path:str) -> str:
    return str(path).replace(" ", "\\ ")

def write_depfile(path:pl.Path, target:str|pl.Path, deps:Iterable[str|pl.Path]) -> bool:
    """ Write a depfile naming 'target' as depending on 'deps', for ninja's depfile support """
    entries = [_escape_dep(str(x)) for x in deps]
    lines   = ["{}:".format(_escape_dep(str(target)))]
    lines  += [" {}".format(x) for x in entries]
    text    = " \\\n".join(lines) + "\n"
    return write_if_changed(pl.Path(path), text)

def read_depfile(path:pl.Path) -> list[pl.Path]:
    """ The dependencies listed in a depfile, in order, without duplicates.
      A missing depfile has no dependencies.
    """
    path = pl.Path(path)
    if not path.is_file():
        return []

    text   = path.read_text().replace("\\\n", " ")
    found  = []
    for line in text.splitlines():
        match line.partition(": "):
            case (_, "", _) if line.rstrip().endswith(":"):
                continue
            case (_, "", _):
                logging.warning("Unparseable depfile line in %s: %s", path, line)
                continue
            case (_, _, deps):
                pass

        for dep in DEP_SPLIT_RE.split(deps.strip()):
            if not bool(dep):
                continue
            dep_path = pl.Path(dep.replace("\\ ", " "))
            if dep_path not in found:
                found.append(dep_path)

    return found

def mtime(path:pl.Path) -> None|float:
    try:
        return pl.Path(path).stat().st_mtime
    except FileNotFoundError:
        return None

def is_stale(outputs:Iterable[pl.Path], inputs:Iterable[pl.Path]) -> bool:
    """ Outputs are stale when any of them is missing, any input is missing,
      or any input is newer than the oldest output.
    """
    out_times = [mtime(x) for x in outputs]
    if not bool(out_times) or any(x is None for x in out_times):
        return True

    oldest = min(out_times)
    for path in inputs:
        match mtime(path):
            case None:
                logging.debug("Missing input: %s", path)
                return True
            case float() as in_time if oldest < in_time:
                logging.debug("Newer input: %s", path)
                return True
            case _:
                pass
    else:
        return False
