"""
Base generator interface for all code generation targets.

Defines the contract that all language generators must implement.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Any, Optional

from .config import GenerationConfig
from .errors import GenerationError
from .overlay import Overlay
from .postprocess import PostCommand
from .schema import Schema
from .templates import TemplateEngine, TemplateError, create_template_engine


@dataclass
class GeneratedState:
    """The result of one generation pass."""

    # Generated code to write over the output directory
    overlay: Overlay = field(default_factory=Overlay)

    # Commands to run once generation has converged, e.g. `go mod tidy`
    post_commands: List[PostCommand] = field(default_factory=list)

    # The generated code has to be generated again. This happens when a
    # pass wrote templates that depend on generated types: the next pass
    # runs with both the templates and the generated types on disk.
    need_regenerate: bool = False


class Generator(ABC):
    """Abstract base class for all code generators."""

    # In-memory templates, keyed by name; subclasses fill this in
    templates: Dict[str, str] = {}

    def __init__(self, config: GenerationConfig):
        """Initialize generator with its configuration."""
        self.config = config
        self._template_engine: Optional[TemplateEngine] = None

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target language (e.g., 'go', 'typescript')."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files (e.g., '.go', '.ts')."""
        pass

    @abstractmethod
    def generate_module(self, schema: Schema, schema_version: str) -> GeneratedState:
        """
        Generate code in the context of a module.

        Args:
            schema: Schema graph with parents linked
            schema_version: Version tag of the introspected API

        Returns:
            GeneratedState for this pass

        Raises:
            GenerationError: If the schema or configuration cannot be generated
        """
        pass

    @abstractmethod
    def generate_client(self, schema: Schema, schema_version: str) -> GeneratedState:
        """
        Generate code for a standalone client.

        Args:
            schema: Schema graph with parents linked
            schema_version: Version tag of the introspected API

        Returns:
            GeneratedState for this pass

        Raises:
            GenerationError: If the schema or configuration cannot be generated
        """
        pass

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._template_engine = create_template_engine(self.templates)
        return self._template_engine

    @property
    def source_dir(self) -> Path:
        """Module source directory on disk (read-only for generators)."""
        return self.config.module_source_dir

    def read_existing(self, relative_path: str) -> Optional[str]:
        """
        Read a file that already exists under the module source directory.

        Generators may look at what previous passes or the user put on
        disk, but must never write there.
        """
        path = self.source_dir / relative_path
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise GenerationError(f"cannot read existing file {path}: {e}") from e

    def output_path(self, relative_path: str) -> str:
        """Overlay path of a file that lives under the module source directory."""
        source = Path(self.config.module_source_path)
        try:
            return Overlay.normalize((source / relative_path).as_posix())
        except ValueError as e:
            raise GenerationError(f"invalid output path: {e}") from e

    def validate_schema(self, schema: Schema) -> List[str]:
        """
        Validate the schema for structural issues.

        Raises:
            GenerationError: If a field references a type the schema lacks

        Returns:
            List of warning messages (empty if no issues)
        """
        missing = schema.missing_type_refs()
        if missing:
            raise GenerationError(
                "schema references undeclared types: " + "; ".join(missing)
            )

        warnings = []
        for t in schema.visible_types():
            if t.kind.value in ("OBJECT", "INTERFACE") and not t.fields:
                warnings.append(f"Type '{t.name}' has no fields")
        return warnings

    def format_code(self, code: str) -> str:
        """
        Apply basic formatting to generated code.

        Strips trailing whitespace, collapses runs of blank lines and
        makes sure the file ends with exactly one newline.
        """
        formatted_lines = []
        blank_count = 0

        for line in code.split("\n"):
            stripped = line.rstrip()
            if not stripped:
                blank_count += 1
                if blank_count <= 1:
                    formatted_lines.append("")
            else:
                blank_count = 0
                formatted_lines.append(stripped)

        return "\n".join(formatted_lines).strip("\n") + "\n"

    # Template helper methods

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a template with context.

        Raises:
            GenerationError: If rendering fails
        """
        try:
            return self.template_engine.render_template(template_name, context)
        except TemplateError as e:
            raise GenerationError(str(e)) from e

    def template_exists(self, template_name: str) -> bool:
        """Check if a template exists."""
        return self.template_engine.template_exists(template_name)
