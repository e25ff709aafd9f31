"""
Configuration management for code generation.

Holds the immutable GenerationConfig shared by every generation pass and
loads it from JSON files with overrides.
"""

import json
from enum import Enum
from pathlib import Path
from typing import Dict, Any, Optional, Union, Tuple, TYPE_CHECKING
from dataclasses import dataclass, field, fields, replace

from .errors import ConfigError

if TYPE_CHECKING:
    from ...introspection import EngineConnection


class SDKLang(Enum):
    """Target languages known to the built-in backends."""

    GO = "go"
    TYPESCRIPT = "typescript"


@dataclass(frozen=True)
class ModuleDependency:
    """A dependency of the module being generated."""

    kind: str
    name: str
    pin: str = ""
    source: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModuleDependency":
        """Build from a dict using either wire keys or field names."""
        return cls(
            kind=data.get("kind", ""),
            name=data.get("moduleOriginalName", data.get("name", "")),
            pin=data.get("pin", ""),
            source=data.get("asString", data.get("source", "")),
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            "kind": self.kind,
            "moduleOriginalName": self.name,
            "pin": self.pin,
            "asString": self.source,
        }


@dataclass(frozen=True)
class GenerationConfig:
    """How one code generation invocation should behave."""

    # Target language tag
    lang: str
    # Path to place generated code
    output_dir: str

    # Module to generate code for
    module_name: str = ""
    # Subpath in output_dir where the module source lives
    module_source_path: str = "."
    # Path from the module source subpath to the context directory
    module_parent_path: str = ""

    # Optional pre-computed introspection payload (JSON string)
    introspection_json: Optional[str] = None

    # Merge with a project descriptor in a parent directory
    merge: bool = False
    # Initializing a new module
    is_init: bool = False
    # Only generate the client code
    client_only: bool = False

    # Every dependency used by the module, in order
    module_dependencies: Tuple[ModuleDependency, ...] = ()

    # Generate the client in bundle mode
    bundle: bool = False

    # Live connection, only used when introspection runs on demand
    connection: Optional["EngineConnection"] = field(
        default=None, repr=False, compare=False
    )

    def __post_init__(self):
        # Callers commonly hand in lists; keep the stored value immutable
        if not isinstance(self.module_dependencies, tuple):
            object.__setattr__(
                self, "module_dependencies", tuple(self.module_dependencies)
            )
        lang = self.lang.value if isinstance(self.lang, SDKLang) else str(self.lang)
        object.__setattr__(self, "lang", lang.lower())
        object.__setattr__(self, "output_dir", str(self.output_dir))

    @property
    def module_source_dir(self) -> Path:
        """Absolute location of the module source inside output_dir."""
        return (Path(self.output_dir) / self.module_source_path).resolve()

    def with_overrides(self, **changes: Any) -> "GenerationConfig":
        """Return a copy with some fields changed."""
        return replace(self, **changes)

    def validate(self) -> list[str]:
        """
        Validate the configuration.

        Returns:
            List of warnings (empty if no issues)
        """
        warnings = []

        if self.lang not in {lang.value for lang in SDKLang}:
            warnings.append(f"No built-in backend for language: {self.lang}")

        if not self.module_name and not self.client_only:
            warnings.append("module_name is empty")

        if Path(self.module_source_path).is_absolute():
            warnings.append(
                f"module_source_path should be relative: {self.module_source_path}"
            )

        if self.introspection_json is None and self.connection is None:
            warnings.append("Neither introspection_json nor connection is set")

        return warnings


class ConfigManager:
    """Loads GenerationConfig values from JSON files and overrides."""

    def __init__(self):
        """Initialize configuration manager."""
        self._defaults: Dict[str, Any] = {
            "module_source_path": ".",
            "merge": False,
            "is_init": False,
            "client_only": False,
            "bundle": False,
        }

    def get_config(
        self,
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ) -> GenerationConfig:
        """
        Get complete configuration.

        Args:
            custom_config: Configuration overrides
            config_file: Path to JSON configuration file

        Returns:
            Merged configuration
        """
        base_config = self._defaults.copy()

        if config_file:
            base_config.update(self._load_config_file(config_file))

        if custom_config:
            base_config.update(custom_config)

        return self._dict_to_config(base_config)

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == ".json":
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(
                f"Invalid JSON in configuration file {path}: {e}"
            ) from e
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {e}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        return config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> GenerationConfig:
        """Convert dictionary to GenerationConfig instance."""
        known_fields = {f.name for f in fields(GenerationConfig)}
        unknown = sorted(set(config_dict) - known_fields)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

        for required in ("lang", "output_dir"):
            if not config_dict.get(required):
                raise ConfigError(f"Missing required configuration key: {required}")

        config_args = dict(config_dict)
        config_args["module_dependencies"] = tuple(
            dep if isinstance(dep, ModuleDependency) else ModuleDependency.from_dict(dep)
            for dep in config_dict.get("module_dependencies") or []
        )

        return GenerationConfig(**config_args)

    def save_config(self, config: GenerationConfig, output_path: Union[str, Path]):
        """Save configuration to JSON file (the live connection is not saved)."""
        path = Path(output_path)

        config_dict = {
            "lang": config.lang,
            "output_dir": config.output_dir,
            "module_name": config.module_name,
            "module_source_path": config.module_source_path,
            "module_parent_path": config.module_parent_path,
            "introspection_json": config.introspection_json,
            "merge": config.merge,
            "is_init": config.is_init,
            "client_only": config.client_only,
            "module_dependencies": [d.to_dict() for d in config.module_dependencies],
            "bundle": config.bundle,
        }

        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(config_dict, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration to {path}: {e}") from e


# Global configuration manager instance
_config_manager = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(
    config_file: Optional[Union[str, Path]] = None,
    custom_config: Optional[Dict[str, Any]] = None,
) -> GenerationConfig:
    """
    Convenience function to load configuration.

    Args:
        config_file: Path to JSON configuration file
        custom_config: Configuration overrides

    Returns:
        Merged configuration
    """
    return get_config_manager().get_config(custom_config, config_file)
