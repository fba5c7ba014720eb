"""Rego policy syntax tree, value semantics and built-in functions."""

__version__ = "0.1.0"