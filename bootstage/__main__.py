#!/usr/bin/env python3
"""
The bootstage cli runner
"""
# Imports:
from __future__ import annotations

import logging as logmod

##-- logging
logging         = logmod.root
logging.setLevel(logmod.WARNING)
##-- end logging

def main():
    from bootstage.control.main import BootstageMain
    main_obj = BootstageMain()
    main_obj()

if __name__ == "__main__":
    main()
