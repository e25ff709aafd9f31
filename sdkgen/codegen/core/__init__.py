"""
Core code generation components.

Provides the schema graph, the generation contract, the overlay merger
and the regeneration controller shared by all language generators.
"""

from .errors import (
    CodegenError,
    ConfigError,
    ConvergenceError,
    GenerationError,
    IntrospectionError,
    MergeError,
    PostProcessError,
)
from .schema import (
    Schema,
    SchemaType,
    SchemaField,
    InputValue,
    EnumValue,
    TypeKind,
    TypeRef,
    set_schema_parents,
)
from .generator import Generator, GeneratedState
from .naming import NameSanitizer, NamingCase
from .config import (
    GenerationConfig,
    ModuleDependency,
    SDKLang,
    ConfigManager,
    load_config,
)
from .templates import TemplateEngine, TemplateError, create_template_engine
from .overlay import (
    Overlay,
    OverlayTarget,
    DirectoryTarget,
    MergeReport,
    apply_overlay,
)
from .postprocess import (
    PostCommand,
    CommandExecutor,
    SubprocessExecutor,
    NoopExecutor,
    run_post_commands,
)
from .regenerate import (
    ControllerState,
    GenerationMode,
    GenerationOutcome,
    RegenerationController,
)

__all__ = [
    # Errors
    "CodegenError",
    "ConfigError",
    "ConvergenceError",
    "GenerationError",
    "IntrospectionError",
    "MergeError",
    "PostProcessError",
    # Schema graph
    "Schema",
    "SchemaType",
    "SchemaField",
    "InputValue",
    "EnumValue",
    "TypeKind",
    "TypeRef",
    "set_schema_parents",
    # Generation contract
    "Generator",
    "GeneratedState",
    # Naming utilities - language-agnostic
    "NameSanitizer",
    "NamingCase",
    # Configuration system
    "GenerationConfig",
    "ModuleDependency",
    "SDKLang",
    "ConfigManager",
    "load_config",
    # Template system - language-agnostic
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
    # Overlay merger
    "Overlay",
    "OverlayTarget",
    "DirectoryTarget",
    "MergeReport",
    "apply_overlay",
    # Post-processing
    "PostCommand",
    "CommandExecutor",
    "SubprocessExecutor",
    "NoopExecutor",
    "run_post_commands",
    # Regeneration controller
    "ControllerState",
    "GenerationMode",
    "GenerationOutcome",
    "RegenerationController",
]
