#!/usr/bin/env python3
"""
minibp: the canonical generator.

Only the bootstrap module types are registered.
Generates the primary manifest, and with -t, the bootstrap template.
"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import logging as logmod

# ##-- end stdlib imports

# ##-- 1st party imports
from bootstage import bootstrap
from bootstage.enums import Stage_e
from bootstage.graph.context import Context

# ##-- end 1st party imports

##-- logging
logging = logmod.getLogger(__name__)
##-- end logging

def main(argv:None|list[str]=None) -> None:
    bootstrap.main(Context(), stage=Stage_e.PRIMARY, argv=argv)

if __name__ == "__main__":
    main()
