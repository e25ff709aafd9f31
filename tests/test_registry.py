"""Tests for the generator registry."""

import json

import pytest

from sdkgen.codegen.core.generator import Generator
from sdkgen.codegen.languages.go import GoGenerator
from sdkgen.codegen.languages.typescript import TypeScriptGenerator
from sdkgen.codegen.registry import (
    GeneratorRegistry,
    RegistryError,
    get_registry,
    is_language_supported,
    list_supported_languages,
)
from sdkgen.codegen.core.errors import GenerationError

from conftest import ScriptedGenerator


class TestGeneratorRegistry:
    """Tests for registering and looking up backends."""

    def test_builtin_languages(self) -> None:
        """Test that both built-in backends are registered with aliases."""
        assert list_supported_languages() == ["go", "typescript"]
        assert is_language_supported("golang")
        assert is_language_supported("TS")
        assert not is_language_supported("rust")

    def test_create_generator_selects_by_lang(self, make_config) -> None:
        """Test that the backend is chosen from the configuration."""
        registry = get_registry()

        assert isinstance(registry.create_generator(make_config()), GoGenerator)
        assert isinstance(
            registry.create_generator(make_config(lang="ts")), TypeScriptGenerator
        )

    def test_create_generator_from_dict_and_file(self, tmp_path, output_dir) -> None:
        """Test that configs can also be given as dicts or JSON files."""
        values = {"lang": "typescript", "output_dir": str(output_dir)}
        path = tmp_path / "config.json"
        path.write_text(json.dumps(values))

        assert isinstance(get_registry().create_generator(values), TypeScriptGenerator)
        assert isinstance(get_registry().create_generator(path), TypeScriptGenerator)

    def test_unknown_language(self, make_config) -> None:
        """Test that an unknown language is a generation error."""
        with pytest.raises(RegistryError, match="rust") as exc_info:
            get_registry().create_generator(make_config(lang="rust"))

        assert isinstance(exc_info.value, GenerationError)

    def test_register_rejects_non_generators(self) -> None:
        """Test that only Generator subclasses can be registered."""
        with pytest.raises(RegistryError):
            GeneratorRegistry().register("bad", dict)

    def test_alias_conflicts(self) -> None:
        """Test that an alias cannot point at two languages."""
        registry = GeneratorRegistry()
        registry.register("one", ScriptedGenerator, aliases=["shared"])

        with pytest.raises(RegistryError, match="already points"):
            registry.register("two", ScriptedGenerator, aliases=["shared"])

    def test_unregister_removes_aliases(self) -> None:
        """Test that unregistering drops the language and its aliases."""
        registry = GeneratorRegistry()
        registry.register("one", ScriptedGenerator, aliases=["uno"])

        registry.unregister("one")

        assert not registry.is_supported("one")
        assert not registry.is_supported("uno")

    def test_existing_registration_is_kept(self) -> None:
        """Test that registering twice without replace keeps the first class."""
        registry = GeneratorRegistry()
        registry.register("go", GoGenerator)
        registry.register("go", ScriptedGenerator)

        assert registry.get_generator_class("go") is GoGenerator
        assert issubclass(registry.get_generator_class("go"), Generator)
