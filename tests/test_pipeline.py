"""End-to-end tests for the generation pipeline."""

import io
import json

import pytest

from sdkgen.codegen import generate, load_schema
from sdkgen.codegen.core.errors import IntrospectionError, MergeError
from sdkgen.codegen.core.postprocess import NoopExecutor
from sdkgen.codegen.core.regenerate import GenerationMode


class TestLoadSchema:
    """Tests for obtaining the schema."""

    def test_links_parents(self, make_config, introspection_json) -> None:
        """Test that the loaded schema has every field's parent set."""
        schema, _ = load_schema(make_config(introspection_json=introspection_json))

        assert all(f.parent is t for t, f in schema.iter_fields())

    def test_prefers_introspection_file(self, make_config, tmp_path, introspection_data) -> None:
        """Test that an explicit file wins over the configured payload."""
        introspection_data["__schemaVersion"] = "from-file"
        path = tmp_path / "schema.json"
        path.write_text(json.dumps(introspection_data))

        _, version = load_schema(make_config(introspection_json="{}"), path)

        assert version == "from-file"

    def test_without_any_source(self, make_config) -> None:
        """Test that a config with no schema source fails."""
        with pytest.raises(IntrospectionError):
            load_schema(make_config())


class TestGenerate:
    """Tests for generate()."""

    def test_go_module_end_to_end(self, make_config, introspection_json, output_dir) -> None:
        """Test a full module generation into an empty directory."""
        executor = NoopExecutor()
        log = io.StringIO()

        outcome = generate(
            make_config(introspection_json=introspection_json),
            executor=executor,
            log_writer=log,
        )

        assert outcome.passes == 2
        assert (output_dir / "main.go").exists()
        assert (output_dir / "internal" / "sdk" / "sdk.gen.go").exists()
        assert [c.argv for c in executor.executed] == [
            ["go", "mod", "tidy"],
            ["go", "mod", "tidy"],
        ]
        assert log.getvalue().splitlines()[-1].startswith("running go mod tidy")

    def test_typescript_client(self, make_config, introspection_json, output_dir) -> None:
        """Test client generation for TypeScript."""
        config = make_config(lang="typescript", introspection_json=introspection_json)

        outcome = generate(config, GenerationMode.CLIENT, executor=NoopExecutor())

        assert outcome.passes == 1
        assert sorted(outcome.files_written) == ["sdk/client.gen.ts", "sdk/deps.gen.ts"]
        assert (output_dir / "sdk" / "client.gen.ts").exists()

    def test_introspection_failure_writes_nothing(self, make_config, output_dir) -> None:
        """Test that a broken payload aborts before any write."""
        with pytest.raises(IntrospectionError):
            generate(make_config(introspection_json="{"), executor=NoopExecutor())

        assert list(output_dir.iterdir()) == []

    def test_merge_failure(self, make_config, introspection_json, output_dir) -> None:
        """Test that merge failures surface with the failing path."""
        (output_dir / "internal").write_text("not a directory")

        with pytest.raises(MergeError) as exc_info:
            generate(
                make_config(introspection_json=introspection_json),
                executor=NoopExecutor(),
            )

        assert exc_info.value.path.startswith("internal/")
        assert exc_info.value.pass_number == 1
