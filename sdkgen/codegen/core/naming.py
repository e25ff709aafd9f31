"""
Naming utilities for safe code generation.

Handles name sanitization, case conversions and keyword conflicts
across different programming languages.
"""

import re
from typing import Set, Dict, Optional
from enum import Enum


class NamingCase(Enum):
    """Different naming case styles."""
    SNAKE_CASE = "snake"      # user_name
    CAMEL_CASE = "camel"      # userName
    PASCAL_CASE = "pascal"    # UserName
    SCREAMING_SNAKE = "screaming_snake"  # USER_NAME


class NameSanitizer:
    """Handles name sanitization and case conversion."""

    def __init__(self, reserved_words: Optional[Set[str]] = None,
                 builtin_types: Optional[Set[str]] = None):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Set of language reserved words
            builtin_types: Set of builtin type names that might conflict
        """
        self.reserved_words = reserved_words or set()
        self.builtin_types = builtin_types or set()
        self._name_cache: Dict[str, str] = {}

    def sanitize_name(self, name: str, target_case: NamingCase = NamingCase.SNAKE_CASE,
                      suffix_on_conflict: str = "_") -> str:
        """
        Sanitize a name for safe use in target language.

        Results are cached, so the same input always maps to the same
        identifier within one sanitizer.

        Args:
            name: Original name to sanitize
            target_case: Desired case style
            suffix_on_conflict: Suffix to add for reserved word conflicts

        Returns:
            Sanitized name safe for use
        """
        cache_key = f"{name}_{target_case.value}_{suffix_on_conflict}"
        if cache_key in self._name_cache:
            return self._name_cache[cache_key]

        cleaned = self._clean_basic(name)
        converted = self._convert_case(cleaned, target_case)
        if converted and converted[0].isdigit():
            converted = f"_{converted}"
        final_name = self._resolve_conflicts(converted, suffix_on_conflict)

        self._name_cache[cache_key] = final_name
        return final_name

    def _clean_basic(self, name: str) -> str:
        """Basic name cleanup - remove invalid characters."""
        cleaned = re.sub(r'[^a-zA-Z0-9_-]', '_', name)
        cleaned = cleaned.strip('_-')

        if not cleaned:
            cleaned = "field"

        return cleaned

    def _convert_case(self, name: str, target_case: NamingCase) -> str:
        """Convert name to target case style."""
        if target_case == NamingCase.SNAKE_CASE:
            return self.to_snake_case(name)
        elif target_case == NamingCase.CAMEL_CASE:
            return self.to_camel_case(name)
        elif target_case == NamingCase.PASCAL_CASE:
            return self.to_pascal_case(name)
        elif target_case == NamingCase.SCREAMING_SNAKE:
            return self.to_snake_case(name).upper()
        else:
            return name

    @staticmethod
    def to_snake_case(name: str) -> str:
        """Convert to snake_case."""
        name = re.sub(r'[-\s]+', '_', name)
        # Split acronyms from words: HTTPServer -> HTTP_Server
        name = re.sub(r'([A-Z]+)([A-Z][a-z])', r'\1_\2', name)
        name = re.sub(r'([a-z0-9])([A-Z])', r'\1_\2', name)
        name = name.lower()
        name = re.sub(r'_+', '_', name)
        return name.strip('_')

    @classmethod
    def to_camel_case(cls, name: str) -> str:
        """Convert to camelCase."""
        parts = cls.to_snake_case(name).split('_')
        if not parts:
            return name
        return parts[0].lower() + ''.join(part.capitalize() for part in parts[1:])

    @classmethod
    def to_pascal_case(cls, name: str) -> str:
        """Convert to PascalCase."""
        parts = cls.to_snake_case(name).split('_')
        return ''.join(part.capitalize() for part in parts if part)

    def _resolve_conflicts(self, name: str, suffix: str) -> str:
        """Resolve naming conflicts with reserved words."""
        if name in self.reserved_words or name in self.builtin_types:
            return f"{name}{suffix}"
        return name
