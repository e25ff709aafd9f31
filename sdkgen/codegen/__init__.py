"""
sdkgen Code Generation Module

Generates SDK code in various languages from an introspected API schema.
"""

from .registry import (
    GeneratorRegistry,
    RegistryError,
    get_generator,
    get_registry,
    is_language_supported,
    list_supported_languages,
)
from .core.config import GenerationConfig, ModuleDependency, load_config
from .core.generator import Generator, GeneratedState
from .core.regenerate import GenerationMode, GenerationOutcome
from .core.schema import Schema, set_schema_parents
from .pipeline import generate, load_schema

__all__ = [
    "GeneratorRegistry",
    "RegistryError",
    "Generator",
    "GeneratedState",
    "GenerationConfig",
    "GenerationMode",
    "GenerationOutcome",
    "ModuleDependency",
    "Schema",
    "generate",
    "get_generator",
    "get_registry",
    "is_language_supported",
    "list_supported_languages",
    "load_config",
    "load_schema",
    "set_schema_parents",
]
