"""Task manager core: validation, store, persistence codec and application facade."""

__version__ = "1.0.0"

__all__ = ["__version__"]
