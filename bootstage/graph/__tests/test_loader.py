#!/usr/bin/env python3
"""

"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import logging as logmod
import pathlib as pl

# ##-- end stdlib imports

# ##-- 3rd party imports
import pytest

# ##-- end 3rd party imports

# ##-- 1st party imports
import bootstage.errors as berrs
from bootstage.graph.loader import DescriptionLoader, LoadResult

# ##-- end 1st party imports

logging = logmod.root

def write_desc(base:pl.Path, text:str, *, subdir:None|str=None) -> pl.Path:
    target = base / subdir if subdir else base
    target.mkdir(parents=True, exist_ok=True)
    path = target / "Blueprints.toml"
    path.write_text(text)
    return path

class TestDescriptionLoader:

    def test_sanity(self):
        assert(True is not False)

    def test_basic(self, tmp_path):
        root = write_desc(tmp_path, "")
        obj  = DescriptionLoader(root)
        assert(isinstance(obj, DescriptionLoader))
        assert(obj.filename == "Blueprints.toml")

    def test_missing_root(self, tmp_path):
        with pytest.raises(berrs.BuildDescriptionError):
            DescriptionLoader(tmp_path / "Blueprints.toml").load()

    def test_malformed(self, tmp_path):
        root = write_desc(tmp_path, "[[broken\n")
        with pytest.raises(berrs.BuildDescriptionError) as ctx:
            DescriptionLoader(root).load()

        assert(str(ctx.value.location) == "Blueprints.toml")

    def test_declarations(self, tmp_path):
        root   = write_desc(tmp_path, '[[a_type]]\nname = "x"\n\n[[a_type]]\nname = "y"\n\n[b_type]\nname = "z"\n')
        result = DescriptionLoader(root).load()
        assert(isinstance(result, LoadResult))
        assert([x.data['name'] for x in result.declarations] == ["x", "y", "z"])
        assert([str(x.location) for x in result.declarations] == ["Blueprints.toml:a_type[0]",
                                                                   "Blueprints.toml:a_type[1]",
                                                                   "Blueprints.toml:b_type[0]"])

    def test_bad_declaration(self, tmp_path):
        root = write_desc(tmp_path, 'a_type = "not a table"\n')
        with pytest.raises(berrs.BuildDescriptionError):
            DescriptionLoader(root).load()

    def test_subdirs(self, tmp_path):
        root = write_desc(tmp_path, 'subdirs = ["lib"]\n[[a_type]]\nname = "x"\n')
        write_desc(tmp_path, 'subdirs = ["inner"]\n[[a_type]]\nname = "y"\n', subdir="lib")
        write_desc(tmp_path, '[[a_type]]\nname = "z"\n', subdir="lib/inner")
        result = DescriptionLoader(root).load()
        assert(len(result.files) == 3)
        assert([x.data['name'] for x in result.declarations] == ["x", "y", "z"])
        assert(result.declarations[2].directory == pl.Path("lib/inner"))
        assert(str(result.declarations[2].location) == "lib/inner/Blueprints.toml:a_type[0]")

    def test_missing_subdir(self, tmp_path):
        root = write_desc(tmp_path, 'subdirs = ["ghost"]\n')
        with pytest.raises(berrs.BuildDescriptionError):
            DescriptionLoader(root).load()

    def test_bad_subdirs(self, tmp_path):
        root = write_desc(tmp_path, 'subdirs = "lib"\n')
        with pytest.raises(berrs.BuildDescriptionError):
            DescriptionLoader(root).load()

    def test_glob_subdirs(self, tmp_path):
        root = write_desc(tmp_path, 'subdirs = ["mods/*"]\n')
        write_desc(tmp_path, '[[a_type]]\nname = "b"\n', subdir="mods/b")
        write_desc(tmp_path, '[[a_type]]\nname = "a"\n', subdir="mods/a")
        (tmp_path / "mods" / "empty").mkdir()
        result = DescriptionLoader(root).load()
        assert([x.data['name'] for x in result.declarations] == ["a", "b"])

    def test_glob_subdirs_without_matches(self, tmp_path):
        root   = write_desc(tmp_path, 'subdirs = ["mods/*", "l?b"]\n[[a_type]]\nname = "top"\n')
        result = DescriptionLoader(root).load()
        assert([x.data['name'] for x in result.declarations] == ["top"])
        assert(len(result.files) == 1)

    def test_duplicate_subdirs_read_once(self, tmp_path):
        root = write_desc(tmp_path, 'subdirs = ["lib", "lib", "./lib"]\n')
        write_desc(tmp_path, '[[a_type]]\nname = "y"\n', subdir="lib")
        result = DescriptionLoader(root).load()
        assert(len(result.files) == 2)

    def test_single_worker_matches(self, tmp_path):
        root = write_desc(tmp_path, 'subdirs = ["a", "b", "c"]\n')
        for name in "abc":
            write_desc(tmp_path, '[[t]]\nname = "{}"\n'.format(name), subdir=name)

        many = DescriptionLoader(root, workers=8).load()
        one  = DescriptionLoader(root, workers=1).load()
        assert(many.declarations == one.declarations)
        assert(many.files == one.files)
