"""
Generator registry system for managing available code generators.

A backend is selected once, from ``GenerationConfig.lang``, when the
generator is created.
"""

from typing import Dict, Type, Optional, Any, List, Union
from pathlib import Path

from .core.config import GenerationConfig, load_config
from .core.errors import CodegenError, GenerationError
from .core.generator import Generator
from ..logging_config import get_logger

logger = get_logger(__name__)


class RegistryError(GenerationError):
    """Exception raised for registry-related errors."""

    pass


class GeneratorRegistry:
    """Registry for managing available code generators."""

    def __init__(self):
        """Initialize empty registry."""
        self._generators: Dict[str, Type[Generator]] = {}
        self._aliases: Dict[str, str] = {}

    def register(
        self,
        language: str,
        generator_class: Type[Generator],
        aliases: Optional[List[str]] = None,
        replace: bool = False,
    ):
        """
        Register a generator for a language.

        Args:
            language: Primary language name (e.g., 'go', 'typescript')
            generator_class: Generator class implementing Generator
            aliases: Alternative names for this language
            replace: If True, replace existing registration. If False, skip if exists.

        Raises:
            RegistryError: If generator class is invalid or conflicts exist
        """
        if not (
            isinstance(generator_class, type) and issubclass(generator_class, Generator)
        ):
            raise RegistryError("Generator class must inherit from Generator")

        language_key = language.lower()

        if language_key in self._generators and not replace:
            logger.debug(f"Generator for {language_key} already registered")
            return

        self._generators[language_key] = generator_class

        for alias in aliases or []:
            alias_key = alias.lower()
            if alias_key == language_key:
                continue

            if not replace:
                if alias_key in self._generators:
                    raise RegistryError(
                        f"Alias '{alias}' conflicts with existing primary language"
                    )
                if self._aliases.get(alias_key, language_key) != language_key:
                    raise RegistryError(
                        f"Alias '{alias}' already points to '{self._aliases[alias_key]}'"
                    )

            self._aliases[alias_key] = language_key

    def unregister(self, language: str):
        """Unregister a generator and its aliases."""
        language_key = language.lower()
        self._generators.pop(language_key, None)

        for alias in [a for a, target in self._aliases.items() if target == language_key]:
            del self._aliases[alias]

    def get_generator_class(self, language: str) -> Type[Generator]:
        """
        Get generator class for language.

        Args:
            language: Language name or alias

        Returns:
            Generator class

        Raises:
            RegistryError: If language not found
        """
        language_key = language.lower()

        if language_key in self._generators:
            return self._generators[language_key]

        if language_key in self._aliases:
            return self._generators[self._aliases[language_key]]

        raise RegistryError(
            f"No generator registered for language: {language}. "
            f"Available: {', '.join(self.list_languages())}"
        )

    def create_generator(
        self, config: Union[GenerationConfig, Dict[str, Any], str, Path]
    ) -> Generator:
        """
        Create the generator for a configuration's language.

        Args:
            config: Configuration as GenerationConfig, dict, or JSON file path

        Returns:
            Configured generator instance

        Raises:
            RegistryError: If the language is unknown or creation fails
        """
        if isinstance(config, GenerationConfig):
            final_config = config
        elif isinstance(config, (str, Path)):
            final_config = load_config(config_file=config)
        elif isinstance(config, dict):
            final_config = load_config(custom_config=config)
        else:
            raise RegistryError(f"Invalid config type: {type(config)}")

        generator_class = self.get_generator_class(final_config.lang)
        try:
            return generator_class(final_config)
        except CodegenError as e:
            raise RegistryError(
                f"Failed to create {final_config.lang} generator: {e}"
            ) from e

    def list_languages(self) -> List[str]:
        """Get list of registered primary language names."""
        return sorted(self._generators.keys())

    def get_aliases_for_language(self, language: str) -> List[str]:
        language_key = language.lower()
        return sorted(
            alias for alias, target in self._aliases.items() if target == language_key
        )

    def is_supported(self, language: str) -> bool:
        """Check if language (or one of its aliases) is supported."""
        language_key = language.lower()
        return language_key in self._generators or language_key in self._aliases


# Global registry instance - created once
_global_registry: Optional[GeneratorRegistry] = None


def get_registry() -> GeneratorRegistry:
    """Get the global generator registry, initializing if needed."""
    global _global_registry
    if _global_registry is None:
        _global_registry = GeneratorRegistry()
        _auto_register_generators(_global_registry)
    return _global_registry


def _auto_register_generators(registry: GeneratorRegistry):
    """Register the built-in backends with their aliases."""
    from .languages.go import GoGenerator
    from .languages.typescript import TypeScriptGenerator

    registry.register("go", GoGenerator, aliases=["golang"])
    registry.register("typescript", TypeScriptGenerator, aliases=["ts"])


# Public API functions using the global registry


def register_generator(
    language: str,
    generator_class: Type[Generator],
    aliases: Optional[List[str]] = None,
):
    """Register a generator in the global registry."""
    get_registry().register(language, generator_class, aliases)


def get_generator(
    config: Union[GenerationConfig, Dict[str, Any], str, Path],
) -> Generator:
    """Get generator instance for a configuration from the global registry."""
    return get_registry().create_generator(config)


def list_supported_languages() -> List[str]:
    """List all supported languages from global registry."""
    return get_registry().list_languages()


def is_language_supported(language: str) -> bool:
    """Check if language is supported by global registry."""
    return get_registry().is_supported(language)
