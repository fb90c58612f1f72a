"""
rocksdeps build system
Builds jemalloc and a statically linked RocksDB into a single install directory
"""

__version__ = "1.0.0"

from .main import BuildSystem

__all__ = ["BuildSystem", "__version__"]
