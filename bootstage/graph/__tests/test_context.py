#!/usr/bin/env python3
"""

"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import logging as logmod
import pathlib as pl
import threading

# ##-- end stdlib imports

# ##-- 3rd party imports
import pytest

# ##-- end 3rd party imports

# ##-- 1st party imports
import bootstage.errors as berrs
from bootstage._abstract.module import Module_i
from bootstage._structs.manifest import Manifest
from bootstage._structs.module_id import ModuleId
from bootstage._structs.properties import ModuleProperties
from bootstage.graph.context import Context

# ##-- end 1st party imports

logging = logmod.root

class Simple(Module_i):
    """ Emits a touch of its own name, depending on its direct deps """

    def generate_build_actions(self, ctx):
        ctx.rule("touch", "touch $out")
        deps = []
        ctx.visit_direct_deps(lambda x: deps.append("out/{}".format(x.module_id)))
        ctx.build("touch", "out/{}".format(ctx.module_id), implicit=deps)

class BuilderProps(ModuleProperties):
    primary_builder : bool = False

class Builder(Simple):
    Properties = BuilderProps

    @property
    def is_primary_builder(self):
        return self.properties.primary_builder

class Failing(Module_i):

    def generate_build_actions(self, ctx):
        raise ctx.error("Deliberate failure of %s", ctx.module_name)

class Recorder:
    """ A singleton recording every module it sees """

    def __init__(self):
        self.seen = []

    def generate_build_actions(self, ctx):
        ctx.visit_all_modules(lambda x: self.seen.append(str(x.module_id)))
        ctx.set_variable("count", len(self.seen))
        ctx.phony("everything", [])

def write_desc(base:pl.Path, text:str, *, subdir:None|str=None) -> pl.Path:
    target = base / subdir if subdir else base
    target.mkdir(parents=True, exist_ok=True)
    path = target / "Blueprints.toml"
    path.write_text(text)
    return path

def make_ctx() -> Context:
    ctx = Context()
    ctx.register_module_type("simple", Simple)
    ctx.register_module_type("builder", Builder)
    ctx.register_module_type("failing", Failing)
    return ctx

class TestContextRegistration:

    def test_sanity(self):
        assert(True is not False)

    def test_basic(self):
        obj = Context()
        assert(isinstance(obj, Context))

    def test_register(self):
        obj = make_ctx()
        assert(obj.has_module_type("simple"))
        assert(not obj.has_module_type("other"))

    def test_duplicate_module_type(self):
        obj = make_ctx()
        with pytest.raises(berrs.DuplicateModuleTypeError):
            obj.register_module_type("simple", Simple)

    def test_duplicate_singleton(self):
        obj = make_ctx()
        obj.register_singleton("rec", Recorder)
        with pytest.raises(berrs.DuplicateSingletonError):
            obj.register_singleton("rec", Recorder)

    def test_concurrent_duplicate_registration(self):
        obj      = Context()
        errors   = []
        barrier  = threading.Barrier(8)

        def attempt():
            barrier.wait()
            try:
                obj.register_module_type("racy", Simple)
            except berrs.DuplicateModuleTypeError as err:
                errors.append(err)

        threads = [threading.Thread(target=attempt) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert(len(errors) == 7)
        assert(obj.has_module_type("racy"))

    def test_register_after_build(self, tmp_path):
        obj  = make_ctx()
        root = write_desc(tmp_path, '[[simple]]\nname = "a"\n')
        obj.build(root)
        with pytest.raises(berrs.RegistrationError):
            obj.register_module_type("late", Simple)

    def test_build_twice(self, tmp_path):
        obj  = make_ctx()
        root = write_desc(tmp_path, '[[simple]]\nname = "a"\n')
        obj.build(root)
        with pytest.raises(berrs.RegistrationError):
            obj.build(root)

    def test_fresh(self, tmp_path):
        obj  = make_ctx()
        root = write_desc(tmp_path, '[[simple]]\nname = "a"\n')
        obj.build(root)
        dup  = obj.fresh()
        assert(dup.has_module_type("simple"))
        dup.register_module_type("extra", Simple)
        assert(not obj.has_module_type("extra"))
        assert(isinstance(dup.build(root), Manifest))

class TestContextBuild:

    def test_sanity(self):
        assert(True is not False)

    def test_empty(self, tmp_path):
        root   = write_desc(tmp_path, "")
        result = make_ctx().build(root)
        assert(isinstance(result, Manifest))
        assert(not bool(result.builds))

    def test_acyclic(self, tmp_path):
        root   = write_desc(tmp_path, """
[[simple]]
name = "a"
deps = ["b"]

[[simple]]
name = "b"
deps = ["c"]

[[simple]]
name = "c"
""")
        result = make_ctx().build(root)
        assert([x.outputs[0] for x in result.builds] == ["out/c", "out/b", "out/a"])
        assert(result.builds[1].implicit == ["out/c"])

    def test_cycle(self, tmp_path):
        root = write_desc(tmp_path, """
[[simple]]
name = "A"
deps = ["B"]

[[simple]]
name = "B"
deps = ["C"]

[[simple]]
name = "C"
deps = ["A"]
""")
        with pytest.raises(berrs.DependencyCycleError) as ctx:
            make_ctx().build(root)

        assert(ctx.value.members == {"A", "B", "C"})
        assert("A -> B -> C -> A" in str(ctx.value))
        assert("Blueprints.toml:simple[0]" in str(ctx.value))

    def test_self_cycle(self, tmp_path):
        root = write_desc(tmp_path, '[[simple]]\nname = "a"\ndeps = ["a"]\n')
        with pytest.raises(berrs.DependencyCycleError) as ctx:
            make_ctx().build(root)

        assert(ctx.value.members == {"a"})

    def test_no_primary_builder_required(self, tmp_path):
        root = write_desc(tmp_path, '[[builder]]\nname = "a"\n')
        with pytest.raises(berrs.NoPrimaryBuilderError):
            make_ctx().build(root, require_primary_builder=True)

    def test_no_primary_builder_optional(self, tmp_path):
        root = write_desc(tmp_path, '[[builder]]\nname = "a"\n')
        assert(isinstance(make_ctx().build(root), Manifest))

    def test_one_primary_builder(self, tmp_path):
        root = write_desc(tmp_path, '[[builder]]\nname = "a"\nprimaryBuilder = true\n\n[[builder]]\nname = "b"\n')
        ctx  = make_ctx()
        ctx.build(root, require_primary_builder=True)
        assert(ctx.network.primary_builder().name == "a")

    def test_two_primary_builders(self, tmp_path):
        root = write_desc(tmp_path, '[[builder]]\nname = "a"\nprimaryBuilder = true\n\n[[builder]]\nname = "b"\nprimaryBuilder = true\n')
        with pytest.raises(berrs.MultiplePrimaryBuilderError) as ctx:
            make_ctx().build(root)

        assert(ctx.value.modules == [ModuleId("a"), ModuleId("b")])

    def test_primary_builder_checked_before_cycles(self, tmp_path):
        root = write_desc(tmp_path, """
[[builder]]
name = "a"
primaryBuilder = true
deps = ["b"]

[[builder]]
name = "b"
primaryBuilder = true
deps = ["a"]
""")
        with pytest.raises(berrs.MultiplePrimaryBuilderError):
            make_ctx().build(root)

    def test_unknown_type(self, tmp_path):
        root = write_desc(tmp_path, '[[mystery]]\nname = "a"\n')
        with pytest.raises(berrs.UnknownModuleTypeError) as ctx:
            make_ctx().build(root)

        assert(str(ctx.value.location) == "Blueprints.toml:mystery[0]")

    def test_bad_properties(self, tmp_path):
        root = write_desc(tmp_path, '[[simple]]\nname = "a"\nsrcs = ["x"]\n')
        with pytest.raises(berrs.BuildDescriptionError) as ctx:
            make_ctx().build(root)

        assert("srcs" in str(ctx.value))

    def test_duplicate_module(self, tmp_path):
        root = write_desc(tmp_path, 'subdirs = ["sub"]\n[[simple]]\nname = "a"\n')
        write_desc(tmp_path, '[[simple]]\nname = "a"\n', subdir="sub")
        with pytest.raises(berrs.DuplicateModuleError) as ctx:
            make_ctx().build(root)

        assert("sub/Blueprints.toml:simple[0]" in str(ctx.value))

    def test_missing_dependency(self, tmp_path):
        root = write_desc(tmp_path, '[[simple]]\nname = "a"\ndeps = ["ghost"]\n')
        with pytest.raises(berrs.MissingDependencyError):
            make_ctx().build(root)

    def test_module_error_location(self, tmp_path):
        root = write_desc(tmp_path, '[[simple]]\nname = "a"\n\n[[failing]]\nname = "bad"\n')
        with pytest.raises(berrs.ModuleError) as ctx:
            make_ctx().build(root)

        assert(str(ctx.value.location) == "Blueprints.toml:failing[0]")
        assert("Deliberate failure of bad" in str(ctx.value))

    def test_subdirs(self, tmp_path):
        root = write_desc(tmp_path, 'subdirs = ["lib"]\n[[simple]]\nname = "app"\ndeps = ["lib"]\n')
        write_desc(tmp_path, '[[simple]]\nname = "lib"\n', subdir="lib")
        ctx    = make_ctx()
        result = ctx.build(root)
        assert([x.outputs[0] for x in result.builds] == ["out/lib", "out/app"])
        assert(len(ctx.files_read) == 2)

    def test_singletons_after_modules(self, tmp_path):
        root     = write_desc(tmp_path, '[[simple]]\nname = "b"\n\n[[simple]]\nname = "a"\n')
        recorder = Recorder()
        ctx      = make_ctx()
        ctx.register_singleton("rec", lambda: recorder)
        result   = ctx.build(root)
        assert(recorder.seen == ["a", "b"])
        assert(result.variables["count"] == "2")
        assert(result.builds[-1].source == "rec")

    def test_identical_rules_allowed(self, tmp_path):
        root   = write_desc(tmp_path, '[[simple]]\nname = "a"\n\n[[simple]]\nname = "b"\n')
        result = make_ctx().build(root)
        assert(list(result.rules.keys()) == ["touch"])

    def test_deterministic(self, tmp_path):
        text = """
subdirs = ["x", "y"]
[[simple]]
name = "top"
deps = ["x1", "y1"]
"""
        root = write_desc(tmp_path, text)
        write_desc(tmp_path, '[[simple]]\nname = "x1"\n[[simple]]\nname = "x2"\n', subdir="x")
        write_desc(tmp_path, '[[simple]]\nname = "y1"\ndeps = ["x2"]\n', subdir="y")
        renders = {make_ctx().build(root).render() for _ in range(5)}
        assert(len(renders) == 1)

class TestContextVariants:

    def test_sanity(self):
        assert(True is not False)

    def test_expansion(self, tmp_path):
        root = write_desc(tmp_path, '[[simple]]\nname = "lib"\nvariants = {arch = ["arm", "x86"], os = ["linux"]}\n')
        ctx  = make_ctx()
        ctx.build(root)
        ids  = [str(x.module_id) for x in ctx.network.infos()]
        assert(ids == ["lib{arch=arm,os=linux}", "lib{arch=x86,os=linux}"])

    def test_one_to_many(self, tmp_path):
        root = write_desc(tmp_path, """
[[simple]]
name = "app"
deps = ["lib"]

[[simple]]
name = "lib"
variants = {arch = ["arm", "x86"]}
""")
        ctx  = make_ctx()
        ctx.build(root)
        deps = [str(x.module_id) for x in ctx.network.direct_deps(ModuleId("app"))]
        assert(deps == ["lib{arch=arm}", "lib{arch=x86}"])

    def test_explicit_variant(self, tmp_path):
        root = write_desc(tmp_path, """
[[simple]]
name = "app"
deps = ["lib{arch=x86}"]

[[simple]]
name = "lib"
variants = {arch = ["arm", "x86"]}
""")
        ctx  = make_ctx()
        ctx.build(root)
        deps = [str(x.module_id) for x in ctx.network.direct_deps(ModuleId("app"))]
        assert(deps == ["lib{arch=x86}"])

    def test_inherited_variant(self, tmp_path):
        root = write_desc(tmp_path, """
[[simple]]
name = "app"
deps = ["lib"]
variants = {arch = ["arm", "x86"]}

[[simple]]
name = "lib"
variants = {arch = ["arm", "x86"]}
""")
        ctx  = make_ctx()
        ctx.build(root)
        arm  = ModuleId("app", (("arch", "arm"),))
        deps = [str(x.module_id) for x in ctx.network.direct_deps(arm)]
        assert(deps == ["lib{arch=arm}"])

    def test_unknown_axis(self, tmp_path):
        root = write_desc(tmp_path, '[[simple]]\nname = "app"\ndeps = ["lib{os=linux}"]\n\n[[simple]]\nname = "lib"\n')
        with pytest.raises(berrs.MissingDependencyError):
            make_ctx().build(root)

    def test_no_matching_variant(self, tmp_path):
        root = write_desc(tmp_path, '[[simple]]\nname = "app"\ndeps = ["lib{arch=mips}"]\n\n[[simple]]\nname = "lib"\nvariants = {arch = ["arm"]}\n')
        with pytest.raises(berrs.MissingDependencyError):
            make_ctx().build(root)
