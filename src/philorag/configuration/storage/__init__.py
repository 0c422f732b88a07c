"""Storage configurations for philorag."""

from philorag.configuration.storage.local import LocalStorage

__all__ = ["LocalStorage"]
