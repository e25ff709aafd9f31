"""Tests for the regeneration controller."""

import io

import pytest

from conftest import MemoryTarget, ScriptedGenerator
from sdkgen.codegen.core.errors import (
    ConvergenceError,
    GenerationError,
    MergeError,
    PostProcessError,
)
from sdkgen.codegen.core.generator import GeneratedState
from sdkgen.codegen.core.overlay import Overlay
from sdkgen.codegen.core.postprocess import NoopExecutor, PostCommand
from sdkgen.codegen.core.regenerate import (
    ControllerState,
    GenerationMode,
    RegenerationController,
)
from sdkgen.codegen.core.schema import Schema


def _state(files=None, commands=(), regenerate=False) -> GeneratedState:
    return GeneratedState(
        overlay=Overlay.from_files(files or {}),
        post_commands=list(commands),
        need_regenerate=regenerate,
    )


class TestRegenerationController:
    """Tests for the generate -> merge -> regenerate loop."""

    def test_single_pass_when_no_regeneration_requested(self, make_config) -> None:
        """Test that a converged first pass stops immediately."""
        generator = ScriptedGenerator(make_config(), [_state({"a.txt": "1"})])
        target = MemoryTarget()
        controller = RegenerationController(generator, output=target)

        outcome = controller.run(Schema(), "v1")

        assert outcome.passes == 1
        assert generator.calls == ["module"]
        assert controller.state == ControllerState.CONVERGED
        assert target.files == {"a.txt": b"1"}

    def test_second_pass_sees_first_merge(self, make_config) -> None:
        """Test that a requested regeneration runs after the first merge."""
        target = MemoryTarget()
        seen = []

        class Recording(ScriptedGenerator):
            def generate_module(self, schema, schema_version):
                seen.append(dict(target.files))
                return super().generate_module(schema, schema_version)

        generator = Recording(
            make_config(),
            [
                _state({"starter.txt": "s"}, regenerate=True),
                _state({"glue.txt": "g"}),
            ],
        )
        log = io.StringIO()

        outcome = RegenerationController(generator, output=target, log_writer=log).run(
            Schema(), "v1"
        )

        assert outcome.passes == 2
        assert not outcome.ceiling_reached
        assert seen == [{}, {"starter.txt": b"s"}]
        assert "regenerating (pass 2)" in log.getvalue().splitlines()
        assert outcome.files_written == ["starter.txt", "glue.txt"]

    def test_ceiling_converges_with_warning(self, make_config) -> None:
        """Test that an always-regenerating backend stops at the ceiling."""
        generator = ScriptedGenerator(make_config(), [_state(regenerate=True)])

        outcome = RegenerationController(
            generator, output=MemoryTarget(), max_passes=3
        ).run(Schema(), "v1")

        assert outcome.passes == 3
        assert outcome.ceiling_reached
        assert len(generator.calls) == 3

    def test_ceiling_fails_when_configured(self, make_config) -> None:
        """Test that fail_on_ceiling turns the ceiling into an error."""
        generator = ScriptedGenerator(make_config(), [_state(regenerate=True)])
        controller = RegenerationController(
            generator, output=MemoryTarget(), fail_on_ceiling=True
        )

        with pytest.raises(ConvergenceError) as exc_info:
            controller.run(Schema(), "v1")

        assert exc_info.value.pass_number == 2
        assert controller.state == ControllerState.FAILED

    def test_generation_error_carries_pass_number(self, make_config) -> None:
        """Test that a failing pass is identified and earlier merges are kept."""
        target = MemoryTarget()
        generator = ScriptedGenerator(
            make_config(),
            [_state({"first.txt": "1"}, regenerate=True), GenerationError("bad type")],
        )
        controller = RegenerationController(generator, output=target)

        with pytest.raises(GenerationError) as exc_info:
            controller.run(Schema(), "v1")

        assert exc_info.value.pass_number == 2
        assert exc_info.value.cause == "bad type"
        assert str(exc_info.value) == "pass 2: bad type"
        assert controller.state == ControllerState.FAILED
        assert target.files == {"first.txt": b"1"}

    def test_merge_error_carries_pass_number(self, make_config) -> None:
        """Test that merge failures move the controller to FAILED."""

        def failing_merge(overlay, output, log_writer):
            raise MergeError("a.txt", "disk full")

        generator = ScriptedGenerator(make_config(), [_state({"a.txt": "1"})])
        controller = RegenerationController(generator, merge=failing_merge)

        with pytest.raises(MergeError) as exc_info:
            controller.run(Schema(), "v1")

        assert exc_info.value.pass_number == 1
        assert exc_info.value.path == "a.txt"
        assert controller.state == ControllerState.FAILED

    def test_post_commands_accumulate_and_run_once(self, make_config) -> None:
        """Test that commands from every pass run once, after convergence."""
        tidy = PostCommand("go", ("mod", "tidy"))
        fmt = PostCommand("gofmt", ("-w", "."))
        generator = ScriptedGenerator(
            make_config(),
            [_state(commands=[tidy], regenerate=True), _state(commands=[fmt])],
        )
        executor = NoopExecutor()

        outcome = RegenerationController(
            generator, output=MemoryTarget(), executor=executor
        ).run(Schema(), "v1")

        assert outcome.post_commands == [tidy, fmt]
        assert executor.executed == [tidy, fmt]
        assert outcome.post_report.completed == [tidy, fmt]

    def test_post_commands_not_run_without_executor(self, make_config) -> None:
        """Test that commands are only collected when no executor is given."""
        command = PostCommand("npm", ("install",))
        generator = ScriptedGenerator(make_config(), [_state(commands=[command])])

        outcome = RegenerationController(generator, output=MemoryTarget()).run(
            Schema(), "v1"
        )

        assert outcome.post_commands == [command]
        assert outcome.post_report is None

    def test_post_command_failure(self, make_config) -> None:
        """Test that a failing post command fails the run."""

        class Refusing(NoopExecutor):
            def execute(self, command):
                result = super().execute(command)
                result.returncode = 1
                return result

        generator = ScriptedGenerator(
            make_config(), [_state(commands=[PostCommand("go", ("mod", "tidy"))])]
        )
        controller = RegenerationController(
            generator, output=MemoryTarget(), executor=Refusing()
        )

        with pytest.raises(PostProcessError):
            controller.run(Schema(), "v1")

        assert controller.state == ControllerState.FAILED

    def test_client_mode_calls_generate_client(self, make_config) -> None:
        """Test that the mode selects the backend operation."""
        generator = ScriptedGenerator(make_config(), [_state()])

        RegenerationController(generator, output=MemoryTarget()).run(
            Schema(), "v1", GenerationMode.CLIENT
        )

        assert generator.calls == ["client"]

    def test_controller_runs_once(self, make_config) -> None:
        """Test that a finished controller cannot be reused."""
        generator = ScriptedGenerator(make_config(), [_state()])
        controller = RegenerationController(generator, output=MemoryTarget())
        controller.run(Schema(), "v1")

        with pytest.raises(RuntimeError):
            controller.run(Schema(), "v1")

    def test_max_passes_must_be_positive(self, make_config) -> None:
        """Test that a zero ceiling is rejected."""
        generator = ScriptedGenerator(make_config(), [_state()])

        with pytest.raises(ValueError):
            RegenerationController(generator, max_passes=0)
