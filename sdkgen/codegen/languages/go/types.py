"""
Go type mapping for schema type references.
"""

from typing import Dict

from ...core.naming import NameSanitizer, NamingCase
from ...core.schema import TypeKind, TypeRef

# Built-in GraphQL scalars and their Go types
GO_SCALAR_TYPES: Dict[str, str] = {
    "String": "string",
    "ID": "string",
    "Int": "int",
    "Float": "float64",
    "Boolean": "bool",
}

# Kinds always referenced through a pointer
_POINTER_KINDS = {TypeKind.OBJECT, TypeKind.INTERFACE, TypeKind.INPUT_OBJECT}


class GoTypeMapper:
    """Maps schema type references to Go type expressions."""

    def __init__(self, sanitizer: NameSanitizer):
        self.sanitizer = sanitizer

    def type_name(self, name: str) -> str:
        """Go name for a named schema type."""
        if name in GO_SCALAR_TYPES:
            return GO_SCALAR_TYPES[name]
        return self.sanitizer.sanitize_name(name, NamingCase.PASCAL_CASE)

    def is_builtin_scalar(self, name: str) -> bool:
        return name in GO_SCALAR_TYPES

    def map_type(self, ref: TypeRef) -> str:
        """
        Go type for a field or argument.

        Non-null scalars and enums are plain values, nullable ones are
        pointers; object types are always pointers; lists become slices.
        """
        optional = ref.is_optional
        inner = ref.of_type if ref.kind == TypeKind.NON_NULL else ref

        if inner.kind == TypeKind.LIST:
            return "[]" + self._element_type(inner.of_type)

        named = self.type_name(inner.name)
        if inner.kind in _POINTER_KINDS or optional:
            return "*" + named
        return named

    def _element_type(self, ref: TypeRef) -> str:
        inner = ref.of_type if ref.kind == TypeKind.NON_NULL else ref
        if inner.kind == TypeKind.LIST:
            return "[]" + self._element_type(inner.of_type)
        named = self.type_name(inner.name)
        return "*" + named if inner.kind in _POINTER_KINDS else named
