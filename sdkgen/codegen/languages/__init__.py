"""
Language-specific code generators.

This module contains generators for different programming languages.
"""

from .go import GoGenerator, create_go_generator
from .typescript import TypeScriptGenerator, create_typescript_generator

__all__ = [
    "GoGenerator",
    "create_go_generator",
    "TypeScriptGenerator",
    "create_typescript_generator",
]
