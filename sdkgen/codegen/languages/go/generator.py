"""
Go code generator implementation.

Generates a typed Go client from the schema graph, plus the glue and
project files a Go module needs.
"""

import re
from pathlib import Path
from typing import Dict, List, Any

from ...core.config import GenerationConfig
from ...core.errors import GenerationError
from ...core.generator import Generator, GeneratedState
from ...core.naming import NamingCase
from ...core.postprocess import PostCommand
from ...core.schema import Schema, SchemaType, TypeKind
from ....logging_config import get_logger
from .naming import (
    create_go_sanitizer,
    go_module_path,
    go_object_name,
    validate_go_package_name,
)
from .templates import GO_TEMPLATES, HEADER
from .types import GoTypeMapper

logger = get_logger(__name__)

GO_VERSION = "1.22"

# `func (m *Object) Method(` in hand-written module sources
_METHOD_RE = re.compile(
    r"^func \(\s*\w+\s+\*?(\w+)\s*\)\s+([A-Z]\w*)\s*\(", re.MULTILINE
)
_TYPE_RE = re.compile(r"^type\s+([A-Z]\w*)\s+struct\b", re.MULTILINE)
_MODULE_RE = re.compile(r"^module\s+(\S+)", re.MULTILINE)


class GoGenerator(Generator):
    """Code generator for Go modules and clients."""

    templates = GO_TEMPLATES

    def __init__(self, config: GenerationConfig):
        """Initialize Go generator with configuration."""
        super().__init__(config)

        self.sanitizer = create_go_sanitizer()
        self.type_mapper = GoTypeMapper(self.sanitizer)
        self.package_name = "sdk"

        errors = validate_go_package_name(self.package_name)
        if errors:
            raise GenerationError(f"go: invalid package name: {'; '.join(errors)}")

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "go"

    @property
    def file_extension(self) -> str:
        """Return Go file extension."""
        return ".go"

    @property
    def module_path(self) -> str:
        return go_module_path(self.config.module_name)

    def generate_module(self, schema: Schema, schema_version: str) -> GeneratedState:
        """Generate the module client, glue code and project files."""
        if self.config.bundle:
            raise GenerationError("go: bundle is only supported when generating a client")
        if not self.config.module_name:
            raise GenerationError("go: module_name is required to generate a module")

        self._log_warnings(self.validate_schema(schema))
        state = GeneratedState()

        state.overlay.add_file(
            self.output_path("internal/sdk/sdk.gen.go"),
            self._render_client(schema, schema_version, bundle_dependencies=False),
        )

        if self._needs_go_mod():
            state.overlay.add_file(self.output_path("go.mod"), self._render_go_mod())

        if not self.config.client_only:
            sources = self._read_module_sources()
            if not sources:
                # Without sources the glue has nothing to register; write a
                # starter and run again so the glue picks it up.
                state.overlay.add_file(
                    self.output_path("main.go"),
                    self.render_template(
                        "main.go.j2",
                        {"object_name": go_object_name(self.config.module_name)},
                    ),
                )
                state.need_regenerate = True

            state.overlay.add_file(
                self.output_path("sdk.gen.go"), self._render_module_glue(sources)
            )

        state.post_commands.append(self._tidy_command())
        return state

    def generate_client(self, schema: Schema, schema_version: str) -> GeneratedState:
        """Generate a standalone client package."""
        self._log_warnings(self.validate_schema(schema))
        state = GeneratedState()

        state.overlay.add_file(
            self.output_path("sdk/sdk.gen.go"),
            self._render_client(
                schema, schema_version, bundle_dependencies=self.config.bundle
            ),
        )

        if not self.config.bundle:
            state.overlay.add_file(
                self.output_path("sdk/deps.gen.go"),
                self.format_code(
                    self.render_template(
                        "deps.gen.go.j2",
                        {
                            "header": HEADER,
                            "package_name": self.package_name,
                            "dependencies": self.config.module_dependencies,
                        },
                    )
                ),
            )

        if self._needs_go_mod():
            state.overlay.add_file(self.output_path("go.mod"), self._render_go_mod())

        state.post_commands.append(self._tidy_command())
        return state

    def _render_client(
        self, schema: Schema, schema_version: str, bundle_dependencies: bool
    ) -> str:
        context = self._client_context(schema)
        context.update(
            {
                "header": HEADER,
                "package_name": self.package_name,
                "schema_version": schema_version,
                "bundle_dependencies": bundle_dependencies,
                "dependencies": self.config.module_dependencies,
            }
        )
        return self.format_code(self.render_template("sdk.gen.go.j2", context))

    def _client_context(self, schema: Schema) -> Dict[str, Any]:
        """Build template data for every type of the schema."""
        scalars, enums, unions, structs = [], [], [], []

        for schema_type in schema.visible_types():
            if schema_type.kind == TypeKind.SCALAR:
                if not self.type_mapper.is_builtin_scalar(schema_type.name):
                    scalars.append(
                        {
                            "name": self.type_mapper.type_name(schema_type.name),
                            "description": schema_type.description,
                        }
                    )
            elif schema_type.kind == TypeKind.ENUM:
                enums.append(self._enum_data(schema_type))
            elif schema_type.kind == TypeKind.UNION:
                unions.append(
                    {
                        "name": self.type_mapper.type_name(schema_type.name),
                        "description": schema_type.description,
                        "members": [
                            self.type_mapper.type_name(m)
                            for m in schema_type.possible_types
                        ],
                    }
                )
            else:
                structs.extend(self._struct_data(schema_type))

        return {"scalars": scalars, "enums": enums, "unions": unions, "structs": structs}

    def _enum_data(self, schema_type: SchemaType) -> Dict[str, Any]:
        enum_name = self.type_mapper.type_name(schema_type.name)
        return {
            "name": enum_name,
            "description": schema_type.description,
            "values": [
                {
                    "name": value.name,
                    "const_name": enum_name
                    + self.sanitizer.sanitize_name(value.name, NamingCase.PASCAL_CASE),
                    "description": value.description,
                }
                for value in schema_type.enum_values
            ],
        }

    def _struct_data(self, schema_type: SchemaType) -> List[Dict[str, Any]]:
        """One struct per object / input type, plus one per field with arguments."""
        struct_name = self.type_mapper.type_name(schema_type.name)

        if schema_type.kind == TypeKind.INPUT_OBJECT:
            members = schema_type.input_fields
        else:
            members = schema_type.fields

        structs = [
            {
                "name": struct_name,
                "description": schema_type.description,
                "fields": [self._field_data(m) for m in members],
            }
        ]

        for schema_field in schema_type.fields:
            if not schema_field.args:
                continue
            # parent is set by set_schema_parents(); name the struct after it
            owner = schema_field.parent or schema_type
            args_name = (
                self.type_mapper.type_name(owner.name)
                + self.sanitizer.sanitize_name(schema_field.name, NamingCase.PASCAL_CASE)
                + "Opts"
            )
            structs.append(
                {
                    "name": args_name,
                    "description": f"{args_name} contains the arguments of "
                    f"{owner.name}.{schema_field.name}",
                    "fields": [self._field_data(a) for a in schema_field.args],
                }
            )

        return structs

    def _field_data(self, member) -> Dict[str, Any]:
        return {
            "name": self.sanitizer.sanitize_name(member.name, NamingCase.PASCAL_CASE),
            "type": self.type_mapper.map_type(member.type_ref),
            "json_name": member.name,
            "omitempty": member.type_ref.is_optional,
            "description": member.description,
        }

    def _render_module_glue(self, sources: Dict[str, str]) -> str:
        """Register the exported methods found in the module sources."""
        methods: Dict[str, List[str]] = {}
        for content in sources.values():
            for type_name in _TYPE_RE.findall(content):
                methods.setdefault(type_name, [])
            for type_name, method in _METHOD_RE.findall(content):
                found = methods.setdefault(type_name, [])
                if method not in found:
                    found.append(method)

        objects = [
            {"name": name, "methods": sorted(found)}
            for name, found in sorted(methods.items())
        ]
        return self.format_code(
            self.render_template(
                "module.gen.go.j2",
                {
                    "header": HEADER,
                    "module_path": self.module_path,
                    "module_name": self.config.module_name,
                    "objects": objects,
                },
            )
        )

    def _read_module_sources(self) -> Dict[str, str]:
        """Hand-written .go files of the module (generated files excluded)."""
        sources = {}
        source_dir = self.source_dir
        if not source_dir.is_dir():
            return sources

        for path in sorted(source_dir.glob("*.go")):
            if path.name.endswith(".gen.go") or path.name.endswith("_test.go"):
                continue
            content = self.read_existing(path.name)
            if content is not None:
                sources[path.name] = content
        return sources

    def _needs_go_mod(self) -> bool:
        """
        Decide whether go.mod belongs in the overlay.

        Raises:
            GenerationError: When initializing a module over a go.mod that
                declares another module path
        """
        if self.config.merge:
            return False

        existing = self.read_existing("go.mod")
        if existing is None:
            return True

        match = _MODULE_RE.search(existing)
        declared = match.group(1) if match else None
        if self.config.is_init and declared != self.module_path:
            raise GenerationError(
                f"go: existing go.mod declares module {declared!r}, "
                f"expected {self.module_path!r}"
            )
        return False

    def _render_go_mod(self) -> str:
        return self.render_template(
            "go.mod.j2", {"module_path": self.module_path, "go_version": GO_VERSION}
        )

    def _tidy_command(self) -> PostCommand:
        cwd: Path = self.source_dir
        if self.config.merge and self.config.module_parent_path:
            cwd = (cwd / self.config.module_parent_path).resolve()
        return PostCommand("go", ("mod", "tidy"), cwd=str(cwd))

    def _log_warnings(self, warnings: List[str]) -> None:
        for warning in warnings:
            logger.warning(warning)


def create_go_generator(config: GenerationConfig) -> GoGenerator:
    """Create a Go generator for a configuration."""
    return GoGenerator(config)
