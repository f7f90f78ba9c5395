"""Dough Formula: baker's percentage calculator, share links and dough timer."""

__version__ = "0.1.0"
