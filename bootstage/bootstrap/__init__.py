"""
The bootstrap layer: its module types, its singleton,
and the entry point every generator binary ends with.
"""
from .config import BootstrapConfig
from .main import generate, main, primary_main, register
