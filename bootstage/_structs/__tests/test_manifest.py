#!/usr/bin/env python3
"""

"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import logging as logmod

# ##-- end stdlib imports

# ##-- 3rd party imports
import pytest

# ##-- end 3rd party imports

# ##-- 1st party imports
import bootstage.errors as berrs
from bootstage._structs.manifest import (HEADER, BuildAction, Manifest, Rule,
                                         escape_path)

# ##-- end 1st party imports

logging = logmod.root

class TestRule:

    def test_sanity(self):
        assert(True is not False)

    def test_basic(self):
        obj = Rule.build("cp", "cp $in $out", description="cp $out")
        assert(obj.render() == ["rule cp", "  command = cp $in $out", "  description = cp $out"])

    def test_key_order(self):
        obj = Rule.build("gen", "gen $in", generator=True, depfile="$out.d", description="gen")
        assert([k for k, _ in obj.variables] == ["description", "depfile", "generator"])
        assert(dict(obj.variables)["generator"] == "1")

    def test_false_flags_dropped(self):
        obj = Rule.build("gen", "gen $in", generator=False, restat=None)
        assert(obj.variables == ())

    def test_unknown_key(self):
        with pytest.raises(berrs.ManifestError):
            Rule.build("gen", "gen $in", colour="blue")

    def test_newline(self):
        with pytest.raises(berrs.ManifestError):
            Rule.build("gen", "gen\n$in")

class TestBuildAction:

    def test_escape(self):
        assert(escape_path("a b:c") == "a$ b$:c")
        assert(escape_path("$buildDir/x") == "$buildDir/x")

    def test_escape_newline(self):
        with pytest.raises(berrs.ManifestError):
            escape_path("a\nb")

    def test_render_full(self):
        obj = BuildAction("cc",
                          ["out.o"],
                          inputs=["a.c"],
                          implicit=["a.h"],
                          order_only=["gen"],
                          implicit_outputs=["out.d"],
                          variables={"z": "1", "a": ["x", "y"]},
                          source="mod")
        assert(obj.render() == ["# mod",
                                "build out.o | out.d: cc a.c | a.h || gen",
                                "  a = x y",
                                "  z = 1"])

    def test_render_minimal(self):
        obj = BuildAction("phony", ["all"])
        assert(obj.render() == ["build all: phony"])

class TestManifest:

    def test_sanity(self):
        assert(True is not False)

    def test_basic(self):
        obj = Manifest()
        assert(obj.render().startswith(HEADER))
        assert("ninja_required_version = 1.7.0" in obj.render())

    def test_identical_rule(self):
        obj = Manifest()
        obj.add_rule("cp", "cp $in $out")
        obj.add_rule("cp", "cp $in $out")
        assert(len(obj.rules) == 1)

    def test_conflicting_rule(self):
        obj = Manifest()
        obj.add_rule("cp", "cp $in $out")
        with pytest.raises(berrs.ManifestError):
            obj.add_rule("cp", "cp -r $in $out")

    def test_undeclared_rule(self):
        obj = Manifest()
        with pytest.raises(berrs.ManifestError):
            obj.add_build(BuildAction("cp", ["out"]))

    def test_no_outputs(self):
        obj = Manifest()
        with pytest.raises(berrs.ManifestError):
            obj.add_build(BuildAction("phony", []))

    def test_duplicate_output(self):
        obj = Manifest()
        obj.add_build(BuildAction("phony", ["all"], source="a"))
        with pytest.raises(berrs.ManifestError):
            obj.add_build(BuildAction("phony", ["x"], implicit_outputs=["all"], source="b"))

    def test_outputs_of(self):
        obj = Manifest()
        obj.add_build(BuildAction("phony", ["x", "y"], source="a"))
        obj.add_build(BuildAction("phony", ["z"], source="b"))
        assert(obj.outputs_of("a") == ["x", "y"])

    def test_render_sections(self):
        obj = Manifest()
        obj.set_variable("srcDir", "/src")
        obj.add_rule("cp", "cp $in $out")
        obj.add_build(BuildAction("cp", ["b"], inputs=["a"]))
        obj.add_subninja("sub.ninja")
        obj.add_subninja("sub.ninja")
        obj.add_default("b")
        result = obj.render()
        assert(result == "\n".join([HEADER,
                                    "",
                                    "ninja_required_version = 1.7.0",
                                    "",
                                    "srcDir = /src",
                                    "",
                                    "rule cp",
                                    "  command = cp $in $out",
                                    "",
                                    "build b: cp a",
                                    "",
                                    "subninja sub.ninja",
                                    "",
                                    "default b",
                                    "",
                                    ]))
