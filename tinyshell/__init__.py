"""Core pieces of a small shell: environment, word expansion and builtins."""

__version__ = "0.1.0"