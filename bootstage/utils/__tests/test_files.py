#!/usr/bin/env python3
"""

"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import logging as logmod
import os
import pathlib as pl

# ##-- end stdlib imports

# ##-- 3rd party imports
import pytest

# ##-- end 3rd party imports

# ##-- 1st party imports
from bootstage.utils.files import (is_stale, mtime, read_depfile, write_depfile,
                                   write_if_changed)

# ##-- end 1st party imports

logging = logmod.root

def set_mtime(path:pl.Path, when:float) -> None:
    os.utime(path, (when, when))

class TestWriteIfChanged:

    def test_sanity(self):
        assert(True is not False)

    def test_new_file(self, tmp_path):
        target = tmp_path / "sub" / "out.txt"
        assert(write_if_changed(target, "blah"))
        assert(target.read_text() == "blah")

    def test_unchanged(self, tmp_path):
        target = tmp_path / "out.txt"
        target.write_text("blah")
        set_mtime(target, 1000)
        assert(not write_if_changed(target, "blah"))
        assert(mtime(target) == 1000)

    def test_unchanged_touch(self, tmp_path):
        target = tmp_path / "out.txt"
        target.write_text("blah")
        set_mtime(target, 1000)
        assert(not write_if_changed(target, "blah", touch=True))
        assert(mtime(target) > 1000)

    def test_changed(self, tmp_path):
        target = tmp_path / "out.txt"
        target.write_text("blah")
        assert(write_if_changed(target, "bloo"))
        assert(target.read_text() == "bloo")

class TestDepfile:

    def test_write_read(self, tmp_path):
        target = tmp_path / "out.d"
        write_depfile(target, "build.ninja", ["/a/Blueprints.toml", "/b c/Blueprints.toml"])
        assert(target.read_text().startswith("build.ninja: \\\n"))
        assert(read_depfile(target) == [pl.Path("/a/Blueprints.toml"), pl.Path("/b c/Blueprints.toml")])

    def test_missing(self, tmp_path):
        assert(read_depfile(tmp_path / "missing.d") == [])

    def test_duplicates(self, tmp_path):
        target = tmp_path / "out.d"
        target.write_text("out: /a /b /a\n")
        assert(read_depfile(target) == [pl.Path("/a"), pl.Path("/b")])

    def test_no_deps(self, tmp_path):
        target = tmp_path / "out.d"
        target.write_text("out:\n")
        assert(read_depfile(target) == [])

class TestStaleness:

    @pytest.fixture
    def files(self, tmp_path):
        out = tmp_path / "out"
        inp = tmp_path / "in"
        out.write_text("out")
        inp.write_text("in")
        return out, inp

    def test_missing_output(self, tmp_path, files):
        _, inp = files
        assert(is_stale([tmp_path / "missing"], [inp]))

    def test_no_outputs(self, files):
        _, inp = files
        assert(is_stale([], [inp]))

    def test_missing_input(self, tmp_path, files):
        out, _ = files
        assert(is_stale([out], [tmp_path / "missing"]))

    def test_newer_input(self, files):
        out, inp = files
        set_mtime(out, 1000)
        set_mtime(inp, 2000)
        assert(is_stale([out], [inp]))

    def test_older_input(self, files):
        out, inp = files
        set_mtime(out, 2000)
        set_mtime(inp, 1000)
        assert(not is_stale([out], [inp]))

    def test_equal_times_are_fresh(self, files):
        out, inp = files
        set_mtime(out, 2000)
        set_mtime(inp, 2000)
        assert(not is_stale([out], [inp]))
