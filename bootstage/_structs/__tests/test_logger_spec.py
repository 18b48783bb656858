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
from pydantic import ValidationError
from tomlguard import TomlGuard

# ##-- end 3rd party imports

# ##-- 1st party imports
from bootstage._structs.logger_spec import LoggerSpec

# ##-- end 1st party imports

logging = logmod.root

class TestLoggerSpec:

    def test_sanity(self):
        assert(True is not False)

    def test_basic(self):
        obj = LoggerSpec(name="test.basic")
        assert(obj.level == logmod.WARNING)
        assert(obj.target == "stdout")
        assert(not obj.propagate)

    def test_level_name(self):
        obj = LoggerSpec(name="test.level", level="debug")
        assert(obj.level == logmod.DEBUG)

    def test_bad_level(self):
        with pytest.raises(ValidationError):
            LoggerSpec(name="test.level", level="LOUD")

    def test_none_target(self):
        obj = LoggerSpec(name="test.target", target=None)
        assert(obj.target == "stdout")

    def test_bad_target(self):
        with pytest.raises(ValidationError):
            LoggerSpec(name="test.target", target="printer")

    def test_build_dict(self):
        obj = LoggerSpec.build({"level": "INFO"}, name="test.build")
        assert(obj.name == "test.build")
        assert(obj.level == logmod.INFO)

    def test_build_tomlguard(self):
        obj = LoggerSpec.build(TomlGuard({"level": "ERROR", "target": "stderr"}), name="test.build")
        assert(obj.level == logmod.ERROR)
        assert(obj.target == "stderr")

    def test_build_bad_data(self):
        with pytest.raises(TypeError):
            LoggerSpec.build(["level"])

    def test_apply(self):
        obj    = LoggerSpec(name="test.apply", level="INFO", target="stderr")
        logger = obj.apply()
        assert(logger is logmod.getLogger("test.apply"))
        assert(logger.level == logmod.INFO)
        assert(len(logger.handlers) == 1)
        obj.apply()
        assert(len(logger.handlers) == 1)
        obj.clear()

    def test_apply_pass(self):
        obj    = LoggerSpec(name="test.pass", level="DEBUG", target="pass")
        logger = obj.apply()
        assert(logger.handlers == [])
        assert(logger.level == logmod.DEBUG)

    def test_apply_disabled(self):
        obj    = LoggerSpec(name="test.disabled", disabled=True)
        logger = obj.apply()
        assert(logger.disabled)
        logger.disabled = False

    def test_root(self):
        obj = LoggerSpec(name=LoggerSpec.RootName)
        assert(obj.get() is logmod.getLogger())

    def test_set_level(self):
        obj    = LoggerSpec(name="test.set_level", level="INFO", target="stderr")
        logger = obj.apply()
        obj.set_level("ERROR")
        assert(logger.level == logmod.ERROR)
        assert(all(x.level == logmod.ERROR for x in logger.handlers))
        obj.clear()
