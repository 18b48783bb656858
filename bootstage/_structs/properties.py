#!/usr/bin/env python3
"""
The property bags of module declarations.

Module types subclass ModuleProperties to declare their own fields,
and set it as the 'Properties' attribute of their factory.
Keys may be written camelCase in descriptions (eg: 'excludeSrcs'),
or by their python name.
"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import logging as logmod
import re

# ##-- end stdlib imports

# ##-- 3rd party imports
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# ##-- end 3rd party imports

# ##-- types
# isort: off
from typing import TYPE_CHECKING, Final

# isort: on
# ##-- end types

##-- logging
logging = logmod.getLogger(__name__)
##-- end logging

NAME_RE : Final[re.Pattern] = re.compile(r"^[^{}\s=,]+$")

class ModuleProperties(BaseModel):
    """
      The properties every module declaration can have.

      name     : unique across the tree.
      deps     : 'name' or 'name{axis=value,...}' dependency specs.
      variants : axis -> values. Each combination becomes its own instance.
    """
    model_config = ConfigDict(extra="forbid",
                              frozen=True,
                              populate_by_name=True,
                              alias_generator=to_camel)

    name      : str
    deps      : list[str]            = Field(default_factory=list)
    variants  : dict[str, list[str]] = Field(default_factory=dict)

    @field_validator("name")
    def _validate_name(cls, val):
        if not NAME_RE.match(val):
            raise ValueError("Bad module name", val)
        return val

    @field_validator("variants")
    def _validate_variants(cls, val):
        for axis, values in val.items():
            if not NAME_RE.match(axis):
                raise ValueError("Bad variant axis", axis)
            if not bool(values):
                raise ValueError("Variant axis has no values", axis)
            if len(set(values)) != len(values):
                raise ValueError("Variant axis has repeated values", axis)
        return val
