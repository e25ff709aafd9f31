"""
TypeScript type mapping for schema type references.
"""

from typing import Dict

from ...core.naming import NameSanitizer, NamingCase
from ...core.schema import TypeKind, TypeRef

# Built-in GraphQL scalars and their TypeScript types
TS_SCALAR_TYPES: Dict[str, str] = {
    "String": "string",
    "ID": "string",
    "Int": "number",
    "Float": "number",
    "Boolean": "boolean",
}


class TypeScriptTypeMapper:
    """Maps schema type references to TypeScript type expressions."""

    def __init__(self, sanitizer: NameSanitizer):
        self.sanitizer = sanitizer

    def type_name(self, name: str) -> str:
        if name in TS_SCALAR_TYPES:
            return TS_SCALAR_TYPES[name]
        return self.sanitizer.sanitize_name(name, NamingCase.PASCAL_CASE)

    def is_builtin_scalar(self, name: str) -> bool:
        return name in TS_SCALAR_TYPES

    def map_type(self, ref: TypeRef) -> str:
        """
        TypeScript type for a field or argument.

        Nullability of the outer reference is left to the caller, which
        renders it as an optional property; nullable list elements
        become ``(T | null)[]``.
        """
        inner = ref.of_type if ref.kind == TypeKind.NON_NULL else ref

        if inner.kind == TypeKind.LIST:
            element = self.map_type(inner.of_type)
            if inner.of_type.is_optional:
                return f"({element} | null)[]"
            return f"{element}[]"

        return self.type_name(inner.name)
