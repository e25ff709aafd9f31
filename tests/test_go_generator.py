"""Tests for the Go backend."""

import io

import pytest

from sdkgen.codegen.core.config import ModuleDependency
from sdkgen.codegen.core.errors import GenerationError
from sdkgen.codegen.core.overlay import apply_overlay
from sdkgen.codegen.core.regenerate import GenerationMode, RegenerationController
from sdkgen.codegen.core.schema import TypeKind, TypeRef
from sdkgen.codegen.languages.go import (
    GoGenerator,
    GoTypeMapper,
    create_go_sanitizer,
    go_module_path,
    go_object_name,
    validate_go_package_name,
)

from conftest import SCHEMA_VERSION


def _text(state, path: str) -> str:
    return state.overlay.read_file(path).decode("utf-8")


class TestGoNaming:
    """Tests for Go naming helpers."""

    def test_module_path(self) -> None:
        """Test that module names become lowercase dashed paths."""
        assert go_module_path("My Module") == "sdkgen/my-module"
        assert go_module_path("myModule") == "sdkgen/my-module"

    def test_object_name(self) -> None:
        """Test that module names become exported Go identifiers."""
        assert go_object_name("my-module") == "MyModule"

    def test_package_name_validation(self) -> None:
        """Test Go package name rules."""
        assert validate_go_package_name("sdk") == []
        assert validate_go_package_name("Sdk") == ["Package names should be lowercase"]
        assert "'func' is a Go reserved word" in validate_go_package_name("func")


class TestGoTypeMapper:
    """Tests for mapping type references to Go types."""

    @pytest.fixture
    def mapper(self) -> GoTypeMapper:
        return GoTypeMapper(create_go_sanitizer())

    def test_scalars(self, mapper) -> None:
        """Test that built-in scalars map to Go primitives."""
        non_null_int = TypeRef(TypeKind.NON_NULL, of_type=TypeRef(TypeKind.SCALAR, "Int"))

        assert mapper.map_type(non_null_int) == "int"
        assert mapper.map_type(TypeRef(TypeKind.SCALAR, "String")) == "*string"

    def test_objects_are_pointers(self, mapper) -> None:
        """Test that object references are always pointers."""
        ref = TypeRef(TypeKind.NON_NULL, of_type=TypeRef(TypeKind.OBJECT, "Container"))

        assert mapper.map_type(ref) == "*Container"

    def test_lists_are_slices(self, mapper) -> None:
        """Test that list references become slices of their element type."""
        ref = TypeRef(
            TypeKind.LIST,
            of_type=TypeRef(TypeKind.NON_NULL, of_type=TypeRef(TypeKind.OBJECT, "File")),
        )

        assert mapper.map_type(ref) == "[]*File"


class TestGoClientGeneration:
    """Tests for standalone client generation."""

    def test_client_files(self, make_config, schema) -> None:
        """Test the files of a non-bundled client."""
        generator = GoGenerator(make_config())

        state = generator.generate_client(schema, SCHEMA_VERSION)

        assert state.overlay.files() == ["go.mod", "sdk/deps.gen.go", "sdk/sdk.gen.go"]
        assert not state.need_regenerate
        assert [c.describe() for c in state.post_commands] == [
            f"go mod tidy (in {generator.source_dir})"
        ]

    def test_client_types(self, make_config, schema) -> None:
        """Test the Go declarations generated from the schema."""
        state = GoGenerator(make_config()).generate_client(schema, SCHEMA_VERSION)
        client = _text(state, "sdk/sdk.gen.go")

        assert client.startswith("// Code generated by sdkgen. DO NOT EDIT.\n")
        assert f'const SchemaVersion = "{SCHEMA_VERSION}"' in client
        assert "type Platform string" in client
        assert 'StatusRunning Status = "RUNNING"' in client
        assert "type Result = any" in client
        assert "type Container struct {" in client
        assert 'Stdout *string `json:"stdout,omitempty"`' in client
        assert 'Retries int `json:"retries"`' in client
        assert "__Schema" not in client

    def test_argument_structs_are_named_after_parent(self, make_config, schema) -> None:
        """Test that field arguments get an options struct named after the owner."""
        state = GoGenerator(make_config()).generate_client(schema, SCHEMA_VERSION)
        client = _text(state, "sdk/sdk.gen.go")

        assert "type ContainerWithExecOpts struct {" in client
        assert 'Args []string `json:"args"`' in client
        assert 'Opts *ExecOpts `json:"opts,omitempty"`' in client
        assert "type QueryContainerOpts struct {" in client

    def test_dependencies_keep_their_order(self, make_config, schema) -> None:
        """Test that module dependencies are listed in configuration order."""
        config = make_config(
            module_dependencies=[
                ModuleDependency("git", "first", "abc", "github.com/acme/first"),
                ModuleDependency("local", "second", "", "../second"),
            ]
        )

        deps = _text(GoGenerator(config).generate_client(schema, ""), "sdk/deps.gen.go")

        assert deps.index('"first"') < deps.index('"second"')
        assert 'Source: "github.com/acme/first"' in deps

    def test_bundle_inlines_dependencies(self, make_config, schema) -> None:
        """Test that bundle mode writes a single client file."""
        config = make_config(
            bundle=True, module_dependencies=[ModuleDependency("git", "first")]
        )

        state = GoGenerator(config).generate_client(schema, SCHEMA_VERSION)

        assert "sdk/deps.gen.go" not in state.overlay
        assert "var ModuleDependencies = []ModuleDependency{" in _text(
            state, "sdk/sdk.gen.go"
        )

    def test_incomplete_schema_is_rejected(self, make_config, schema) -> None:
        """Test that references to undeclared types fail generation."""
        schema.types = [t for t in schema.types if t.name != "Status"]

        with pytest.raises(GenerationError, match="Container.status -> Status"):
            GoGenerator(make_config()).generate_client(schema, SCHEMA_VERSION)


class TestGoModuleGeneration:
    """Tests for module generation."""

    def test_first_pass_writes_starter_and_requests_regeneration(
        self, make_config, schema
    ) -> None:
        """Test that an empty module gets a starter main.go and another pass."""
        state = GoGenerator(make_config()).generate_module(schema, SCHEMA_VERSION)

        assert state.need_regenerate
        assert state.overlay.files() == [
            "go.mod",
            "internal/sdk/sdk.gen.go",
            "main.go",
            "sdk.gen.go",
        ]
        assert "module sdkgen/my-module" in _text(state, "go.mod")
        assert "type MyModule struct{}" in _text(state, "main.go")

    def test_existing_sources_are_registered(self, make_config, schema, output_dir) -> None:
        """Test that the glue lists exported methods of hand-written sources."""
        (output_dir / "main.go").write_text(
            "package main\n\n"
            "type MyModule struct{}\n\n"
            "func (m *MyModule) Build(ctx context.Context) error { return nil }\n"
            "func (m *MyModule) helper() {}\n"
        )
        (output_dir / "main_test.go").write_text(
            "func (m *MyModule) TestOnly() {}\n"
        )

        state = GoGenerator(make_config()).generate_module(schema, SCHEMA_VERSION)
        glue = _text(state, "sdk.gen.go")

        assert not state.need_regenerate
        assert "main.go" not in state.overlay
        assert '"MyModule": {"Build"},' in glue
        assert '"sdkgen/my-module/internal/sdk"' in glue

    def test_two_passes_converge_on_empty_directory(
        self, make_config, schema, output_dir
    ) -> None:
        """Test the full loop: starter in pass 1, glue picks it up in pass 2."""
        log = io.StringIO()
        controller = RegenerationController(
            GoGenerator(make_config()), output=output_dir, log_writer=log
        )

        outcome = controller.run(schema, SCHEMA_VERSION, GenerationMode.MODULE)

        assert outcome.passes == 2
        assert not outcome.ceiling_reached
        assert '"MyModule": {"Hello"},' in (output_dir / "sdk.gen.go").read_text()
        lines = log.getvalue().splitlines()
        assert "writing main.go" in lines
        assert "writing internal/sdk/sdk.gen.go [skipped]" in lines
        tidy = f"go mod tidy (in {output_dir.resolve()})"
        assert [c.describe() for c in outcome.post_commands] == [tidy, tidy]

    def test_regenerating_a_converged_module_changes_nothing(
        self, make_config, schema, output_dir
    ) -> None:
        """Test that a rerun over its own output only skips."""
        RegenerationController(GoGenerator(make_config()), output=output_dir).run(
            schema, SCHEMA_VERSION
        )
        log = io.StringIO()

        state = GoGenerator(make_config()).generate_module(schema, SCHEMA_VERSION)
        report = apply_overlay(state.overlay, output_dir, log_writer=log)

        assert not state.need_regenerate
        assert not report.changed

    def test_module_source_subpath(self, make_config, schema, output_dir) -> None:
        """Test that files land under the module source path."""
        config = make_config(module_source_path="mod")

        state = GoGenerator(config).generate_module(schema, SCHEMA_VERSION)

        assert "mod/internal/sdk/sdk.gen.go" in state.overlay
        assert state.post_commands[0].cwd == str((output_dir / "mod").resolve())

    def test_init_with_foreign_go_mod_fails(self, make_config, schema, output_dir) -> None:
        """Test that initializing over another module's go.mod is an error."""
        (output_dir / "go.mod").write_text("module example.com/other\n\ngo 1.21\n")

        with pytest.raises(GenerationError, match="example.com/other"):
            GoGenerator(make_config(is_init=True)).generate_module(
                schema, SCHEMA_VERSION
            )

    def test_existing_go_mod_is_kept(self, make_config, schema, output_dir) -> None:
        """Test that an existing go.mod is not regenerated."""
        (output_dir / "go.mod").write_text("module sdkgen/my-module\n")

        state = GoGenerator(make_config(is_init=True)).generate_module(
            schema, SCHEMA_VERSION
        )

        assert "go.mod" not in state.overlay

    def test_merge_skips_go_mod_and_tidies_parent(
        self, make_config, schema, output_dir
    ) -> None:
        """Test that merge mode leaves go.mod to the parent project."""
        config = make_config(
            merge=True, module_source_path="mod", module_parent_path=".."
        )

        state = GoGenerator(config).generate_module(schema, SCHEMA_VERSION)

        assert "mod/go.mod" not in state.overlay
        assert state.post_commands[0].cwd == str(output_dir.resolve())

    def test_client_only_skips_glue(self, make_config, schema) -> None:
        """Test that client_only generates just the client package."""
        state = GoGenerator(make_config(client_only=True)).generate_module(
            schema, SCHEMA_VERSION
        )

        assert not state.need_regenerate
        assert "sdk.gen.go" not in state.overlay
        assert "main.go" not in state.overlay

    def test_bundle_is_rejected(self, make_config, schema) -> None:
        """Test that bundle mode is refused for modules."""
        with pytest.raises(GenerationError, match="bundle"):
            GoGenerator(make_config(bundle=True)).generate_module(
                schema, SCHEMA_VERSION
            )

    def test_module_name_is_required(self, make_config, schema) -> None:
        """Test that module generation needs a module name."""
        with pytest.raises(GenerationError, match="module_name"):
            GoGenerator(make_config(module_name="")).generate_module(
                schema, SCHEMA_VERSION
            )

    def test_source_path_outside_output_is_rejected(self, make_config, schema) -> None:
        """Test that a module source path escaping the output tree fails."""
        with pytest.raises(GenerationError, match="invalid output path"):
            GoGenerator(make_config(module_source_path="../elsewhere")).generate_module(
                schema, SCHEMA_VERSION
            )
