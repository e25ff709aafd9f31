"""
TypeScript code generator implementation.
"""

import json
import re
from pathlib import Path
from typing import Dict, List, Any, Optional

from ...core.config import GenerationConfig
from ...core.errors import GenerationError
from ...core.generator import Generator, GeneratedState
from ...core.naming import NamingCase
from ...core.postprocess import PostCommand
from ...core.schema import Schema, SchemaType, TypeKind
from ....logging_config import get_logger
from .naming import create_ts_sanitizer, ts_object_name, ts_package_name
from .templates import TS_TEMPLATES, HEADER
from .types import TypeScriptTypeMapper

logger = get_logger(__name__)

TYPESCRIPT_VERSION = "^5.5.4"

_OBJECT_RE = re.compile(r"^\s*@object\(\s*\)")
_CLASS_RE = re.compile(r"^\s*(?:export\s+)?(?:default\s+)?class\s+(\w+)")
_FUNC_RE = re.compile(r"^\s*@func\(\s*\)")
_METHOD_RE = re.compile(r"^\s*(?:public\s+)?(?:static\s+)?(?:async\s+)?(\w+)\s*\(")


class TypeScriptGenerator(Generator):
    """Code generator for TypeScript modules and clients."""

    templates = TS_TEMPLATES

    def __init__(self, config: GenerationConfig):
        super().__init__(config)

        self.sanitizer = create_ts_sanitizer()
        self.type_mapper = TypeScriptTypeMapper(self.sanitizer)

    @property
    def language_name(self) -> str:
        return "typescript"

    @property
    def file_extension(self) -> str:
        return ".ts"

    def generate_module(self, schema: Schema, schema_version: str) -> GeneratedState:
        """
        Generate the module client, glue code and project files.

        A module without hand-written sources gets a starter
        ``src/index.ts`` and asks for another pass, so the glue picks up
        the starter's functions.

        Raises:
            GenerationError: On bundle mode, a missing module name, or an
                existing package.json that belongs to another package
        """
        if self.config.bundle:
            raise GenerationError(
                "typescript: bundle is only supported when generating a client"
            )
        if not self.config.module_name:
            raise GenerationError(
                "typescript: module_name is required to generate a module"
            )

        for warning in self.validate_schema(schema):
            logger.warning(warning)

        state = GeneratedState()
        state.overlay.add_file(
            self.output_path("sdk/client.gen.ts"),
            self._render_client(schema, schema_version, bundle_dependencies=False),
        )

        if not self.config.client_only:
            sources = self._read_module_sources()
            if not sources:
                state.overlay.add_file(
                    self.output_path("src/index.ts"),
                    self.render_template(
                        "index.ts.j2",
                        {"object_name": ts_object_name(self.config.module_name)},
                    ),
                )
                state.need_regenerate = True

            state.overlay.add_file(
                self.output_path("sdk/module.gen.ts"), self._render_module_glue(sources)
            )

        if not self.config.merge:
            self._add_project_files(state)

        state.post_commands.append(self._install_command())
        return state

    def generate_client(self, schema: Schema, schema_version: str) -> GeneratedState:
        """Generate a standalone client, with its dependency manifest unless bundled."""
        for warning in self.validate_schema(schema):
            logger.warning(warning)

        state = GeneratedState()
        state.overlay.add_file(
            self.output_path("sdk/client.gen.ts"),
            self._render_client(
                schema, schema_version, bundle_dependencies=self.config.bundle
            ),
        )

        if not self.config.bundle:
            state.overlay.add_file(
                self.output_path("sdk/deps.gen.ts"),
                self.format_code(
                    self.render_template(
                        "deps.gen.ts.j2",
                        {
                            "header": HEADER,
                            "dependencies": self.config.module_dependencies,
                        },
                    )
                ),
            )

        return state

    def _render_client(
        self, schema: Schema, schema_version: str, bundle_dependencies: bool
    ) -> str:
        scalars, enums, unions, interfaces = [], [], [], []

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
                enums.append(
                    {
                        "name": self.type_mapper.type_name(schema_type.name),
                        "description": schema_type.description,
                        "values": schema_type.enum_values,
                    }
                )
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
                interfaces.extend(self._interface_data(schema_type))

        context = {
            "header": HEADER,
            "schema_version": schema_version,
            "scalars": scalars,
            "enums": enums,
            "unions": unions,
            "interfaces": interfaces,
            "bundle_dependencies": bundle_dependencies,
            "dependencies": self.config.module_dependencies,
        }
        return self.format_code(self.render_template("client.gen.ts.j2", context))

    def _interface_data(self, schema_type: SchemaType) -> List[Dict[str, Any]]:
        name = self.type_mapper.type_name(schema_type.name)
        members = (
            schema_type.input_fields
            if schema_type.kind == TypeKind.INPUT_OBJECT
            else schema_type.fields
        )
        interfaces = [
            {
                "name": name,
                "description": schema_type.description,
                "fields": [self._field_data(m) for m in members],
            }
        ]

        for schema_field in schema_type.fields:
            if not schema_field.args:
                continue
            owner = schema_field.parent or schema_type
            opts_name = (
                self.type_mapper.type_name(owner.name)
                + self.sanitizer.sanitize_name(schema_field.name, NamingCase.PASCAL_CASE)
                + "Opts"
            )
            interfaces.append(
                {
                    "name": opts_name,
                    "description": f"Arguments of {owner.name}.{schema_field.name}",
                    "fields": [self._field_data(a) for a in schema_field.args],
                }
            )

        return interfaces

    def _field_data(self, member) -> Dict[str, Any]:
        return {
            "name": member.name,
            "type": self.type_mapper.map_type(member.type_ref),
            "optional": member.type_ref.is_optional,
            "description": member.description,
        }

    def _render_module_glue(self, sources: Dict[str, str]) -> str:
        objects = [
            {"name": name, "methods": sorted(methods)}
            for name, methods in sorted(scan_module_objects(sources).items())
        ]
        return self.format_code(
            self.render_template(
                "module.gen.ts.j2",
                {
                    "header": HEADER,
                    "module_name": self.config.module_name,
                    "objects": objects,
                },
            )
        )

    def _read_module_sources(self) -> Dict[str, str]:
        """Hand-written .ts files under src/ (generated and declaration files excluded)."""
        sources = {}
        src_dir = self.source_dir / "src"
        if not src_dir.is_dir():
            return sources

        for path in sorted(src_dir.glob("*.ts")):
            if path.name.endswith(".gen.ts") or path.name.endswith(".d.ts"):
                continue
            content = self.read_existing(f"src/{path.name}")
            if content is not None:
                sources[path.name] = content
        return sources

    def _add_project_files(self, state: GeneratedState) -> None:
        """package.json and tsconfig.json, only when the module has none yet."""
        package_name = ts_package_name(self.config.module_name)
        existing = self.read_existing("package.json")

        if existing is None:
            state.overlay.add_file(
                self.output_path("package.json"),
                self.render_template(
                    "package.json.j2",
                    {
                        "package_name": package_name,
                        "typescript_version": TYPESCRIPT_VERSION,
                    },
                ),
            )
        elif self.config.is_init:
            declared = self._declared_package_name(existing)
            if declared != package_name:
                raise GenerationError(
                    f"typescript: existing package.json declares package "
                    f"{declared!r}, expected {package_name!r}"
                )

        if self.read_existing("tsconfig.json") is None:
            state.overlay.add_file(
                self.output_path("tsconfig.json"),
                self.render_template("tsconfig.json.j2", {}),
            )

    def _declared_package_name(self, content: str) -> Optional[str]:
        try:
            package = json.loads(content)
        except json.JSONDecodeError as e:
            raise GenerationError(f"typescript: invalid package.json: {e}") from e
        if not isinstance(package, dict):
            return None
        return package.get("name")

    def _install_command(self) -> PostCommand:
        cwd: Path = self.source_dir
        if self.config.merge and self.config.module_parent_path:
            cwd = (cwd / self.config.module_parent_path).resolve()
        return PostCommand("npm", ("install",), cwd=str(cwd))


def scan_module_objects(sources: Dict[str, str]) -> Dict[str, List[str]]:
    """
    Find ``@object()`` classes and their ``@func()`` methods.

    Args:
        sources: File name to source text

    Returns:
        Class name to method names, in source order
    """
    objects: Dict[str, List[str]] = {}

    for content in sources.values():
        current: Optional[str] = None
        pending_object = pending_func = False

        for line in content.splitlines():
            if _OBJECT_RE.match(line):
                pending_object = True
                continue

            class_match = _CLASS_RE.match(line)
            if class_match:
                current = class_match.group(1) if pending_object else None
                if current is not None:
                    objects.setdefault(current, [])
                pending_object = pending_func = False
                continue

            if _FUNC_RE.match(line):
                pending_func = True
                continue

            if pending_func:
                method_match = _METHOD_RE.match(line)
                if method_match and current is not None:
                    methods = objects[current]
                    if method_match.group(1) not in methods:
                        methods.append(method_match.group(1))
                if line.strip():
                    pending_func = False

    return objects


def create_typescript_generator(config: GenerationConfig) -> TypeScriptGenerator:
    """Create a TypeScript generator for a configuration."""
    return TypeScriptGenerator(config)
