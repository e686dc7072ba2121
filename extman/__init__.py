"""extman: dependency-ordered loading and unloading of host extensions."""

__version__ = "0.1.0"
