"""
Go-specific naming utilities and sanitization.

Handles Go reserved words, builtins, and module path conventions.
"""

import re

from ...core.naming import NameSanitizer, NamingCase


# Go reserved words
GO_RESERVED_WORDS = {
    "break",
    "case",
    "chan",
    "const",
    "continue",
    "default",
    "defer",
    "else",
    "fallthrough",
    "for",
    "func",
    "go",
    "goto",
    "if",
    "import",
    "interface",
    "map",
    "package",
    "range",
    "return",
    "select",
    "struct",
    "switch",
    "type",
    "var",
}

# Go builtin types and functions
GO_BUILTIN_TYPES = {
    "any",
    "bool",
    "byte",
    "error",
    "float32",
    "float64",
    "int",
    "int32",
    "int64",
    "rune",
    "string",
    "append",
    "cap",
    "close",
    "copy",
    "delete",
    "len",
    "make",
    "new",
    "panic",
    "print",
    "println",
    "recover",
}


def create_go_sanitizer() -> NameSanitizer:
    """Create a name sanitizer configured for Go."""
    return NameSanitizer(GO_RESERVED_WORDS, GO_BUILTIN_TYPES)


def go_module_path(module_name: str) -> str:
    """
    Derive the Go module path for a module name.

    "My Module" -> "sdkgen/my-module"
    """
    slug = NameSanitizer.to_snake_case(module_name).replace("_", "-")
    slug = re.sub(r"[^a-z0-9.-]", "", slug) or "module"
    return f"sdkgen/{slug}"


def go_object_name(module_name: str) -> str:
    """Name of the main object type of a module ("my-module" -> "MyModule")."""
    return create_go_sanitizer().sanitize_name(module_name, NamingCase.PASCAL_CASE)


def validate_go_package_name(name: str) -> list[str]:
    """
    Validate Go package name according to Go naming rules.

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if not name:
        errors.append("Package name cannot be empty")
        return errors

    if not name.isidentifier():
        errors.append(f"'{name}' is not a valid Go identifier")

    if name[0].isupper():
        errors.append("Package names should be lowercase")

    if "_" in name:
        errors.append("Package names should not contain underscores")

    if name.lower() in GO_RESERVED_WORDS:
        errors.append(f"'{name}' is a Go reserved word")

    return errors
