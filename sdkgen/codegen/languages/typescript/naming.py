"""
TypeScript-specific naming utilities and sanitization.
"""

import re

from ...core.naming import NameSanitizer, NamingCase

# TypeScript reserved words (strict mode)
TS_RESERVED_WORDS = {
    "break",
    "case",
    "catch",
    "class",
    "const",
    "continue",
    "debugger",
    "default",
    "delete",
    "do",
    "else",
    "enum",
    "export",
    "extends",
    "false",
    "finally",
    "for",
    "function",
    "if",
    "implements",
    "import",
    "in",
    "instanceof",
    "interface",
    "let",
    "new",
    "null",
    "package",
    "private",
    "protected",
    "public",
    "return",
    "static",
    "super",
    "switch",
    "this",
    "throw",
    "true",
    "try",
    "typeof",
    "var",
    "void",
    "while",
    "with",
    "yield",
}

# Global types a generated type name must not shadow
TS_BUILTIN_TYPES = {
    "Array",
    "Boolean",
    "Date",
    "Error",
    "Function",
    "Map",
    "Number",
    "Object",
    "Promise",
    "Record",
    "Set",
    "String",
    "Symbol",
    "any",
    "boolean",
    "never",
    "number",
    "object",
    "string",
    "unknown",
}


def create_ts_sanitizer() -> NameSanitizer:
    """Create a name sanitizer configured for TypeScript."""
    return NameSanitizer(TS_RESERVED_WORDS, TS_BUILTIN_TYPES)


def ts_package_name(module_name: str) -> str:
    """
    npm package name for a module.

    "My Module" -> "my-module"
    """
    slug = NameSanitizer.to_snake_case(module_name).replace("_", "-")
    return re.sub(r"[^a-z0-9.-]", "", slug) or "module"


def ts_object_name(module_name: str) -> str:
    """Name of the main class of a module ("my-module" -> "MyModule")."""
    return create_ts_sanitizer().sanitize_name(module_name, NamingCase.PASCAL_CASE)
