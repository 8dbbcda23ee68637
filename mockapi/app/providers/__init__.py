"""
Storage providers.

The services only depend on the ``ResourceProvider`` contract; these
implementations make the API usable out of the box.
"""

from .factory import ProviderFactory
from .memory import MemoryResourceProvider
from .sqlite import SQLiteResourceProvider

__all__ = ["ProviderFactory", "MemoryResourceProvider", "SQLiteResourceProvider"]
