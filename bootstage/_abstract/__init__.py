"""
Interfaces and Protocols for using Bootstage.

Definitions:

Protocols  - Functional specifications an object needs to implement to be used
Interfaces - Combined Functional and Structural specifications

Protocols have names: {}_p
Interfaces have names {}_i

Interfaces need to be inherited from, and their __init__ method called.
"""

from .module import Module_p, Module_i, Singleton_p
from .control import Engine_p, Generator_p
