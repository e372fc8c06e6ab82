"""Modmake - a minimal build orchestrator for modular Java projects."""

__version__ = "0.1.0"
