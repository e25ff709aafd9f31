"""
TypeScript code generator module.

Generates a typed TypeScript client from an introspected schema, plus the
module glue, starter source and npm project files.
"""

from .generator import (
    TypeScriptGenerator,
    create_typescript_generator,
    scan_module_objects,
)
from .naming import create_ts_sanitizer, ts_object_name, ts_package_name
from .types import TS_SCALAR_TYPES, TypeScriptTypeMapper

__all__ = [
    "TypeScriptGenerator",
    "TypeScriptTypeMapper",
    "TS_SCALAR_TYPES",
    "create_typescript_generator",
    "create_ts_sanitizer",
    "scan_module_objects",
    "ts_object_name",
    "ts_package_name",
]
