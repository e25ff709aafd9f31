"""
Go code generator module.

Generates a typed Go client from an introspected schema, plus the module
glue, starter source and go.mod a Go module needs.
"""

from .generator import GoGenerator, create_go_generator
from .naming import (
    create_go_sanitizer,
    go_module_path,
    go_object_name,
    validate_go_package_name,
)
from .types import GO_SCALAR_TYPES, GoTypeMapper

__all__ = [
    "GoGenerator",
    "GoTypeMapper",
    "GO_SCALAR_TYPES",
    "create_go_generator",
    "create_go_sanitizer",
    "go_module_path",
    "go_object_name",
    "validate_go_package_name",
]
