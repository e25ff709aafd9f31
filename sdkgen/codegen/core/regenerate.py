"""
Regeneration controller.

Some backends emit code that later stages of the same backend need to see
(e.g. a starter file referencing types that only exist once generated).
The controller runs generate -> merge passes until the backend stops
asking for another pass, bounded by a pass ceiling, and then runs the
post commands accumulated across all passes.

States: IDLE -> GENERATING -> MERGING -> (GENERATING ...) -> CONVERGED,
with FAILED reachable from GENERATING, MERGING and a failing post command.
FAILED is terminal.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, TextIO, Union

from .errors import ConvergenceError, GenerationError, MergeError, PostProcessError
from .generator import GeneratedState, Generator
from .overlay import MergeReport, Overlay, OverlayTarget, apply_overlay
from .postprocess import (
    CommandExecutor,
    PostCommand,
    PostProcessReport,
    run_post_commands,
)
from .schema import Schema
from ...logging_config import get_logger

logger = get_logger(__name__)

# The one known reason for a second pass is generated types becoming
# visible to templates that reference them, so two passes are enough.
DEFAULT_MAX_PASSES = 2

MergeFunction = Callable[
    [Overlay, Union[str, Path, OverlayTarget], Optional[TextIO]], MergeReport
]


class GenerationMode(Enum):
    MODULE = "module"
    CLIENT = "client"


class ControllerState(Enum):
    IDLE = "idle"
    GENERATING = "generating"
    MERGING = "merging"
    CONVERGED = "converged"
    FAILED = "failed"


@dataclass
class GenerationOutcome:
    """What a converged controller run did."""

    passes: int
    post_commands: List[PostCommand] = field(default_factory=list)
    merge_reports: List[MergeReport] = field(default_factory=list)
    ceiling_reached: bool = False
    post_report: Optional[PostProcessReport] = None

    @property
    def files_written(self) -> List[str]:
        written = []
        for report in self.merge_reports:
            written.extend(p for p in report.files_written if p not in written)
        return written


class RegenerationController:
    """Drives generation passes until the backend converges."""

    def __init__(
        self,
        generator: Generator,
        output: Optional[Union[str, Path, OverlayTarget]] = None,
        merge: MergeFunction = apply_overlay,
        max_passes: int = DEFAULT_MAX_PASSES,
        fail_on_ceiling: bool = False,
        executor: Optional[CommandExecutor] = None,
        log_writer: Optional[TextIO] = None,
    ):
        """
        Initialize the controller.

        Args:
            generator: Backend to drive
            output: Where overlays are merged (defaults to the generator's
                configured output directory)
            merge: Overlay merge function
            max_passes: Maximum number of generation passes, at least 1
            fail_on_ceiling: Raise ConvergenceError instead of warning when
                the backend still wants another pass at the ceiling
            executor: Runs the post commands once converged; when None
                they are only collected
            log_writer: Text stream for merge and post command lines
        """
        if max_passes < 1:
            raise ValueError(f"max_passes must be at least 1, got {max_passes}")

        self.generator = generator
        self.output = output if output is not None else generator.config.output_dir
        self.merge = merge
        self.max_passes = max_passes
        self.fail_on_ceiling = fail_on_ceiling
        self.executor = executor
        self.log_writer = log_writer

        self.state = ControllerState.IDLE
        self.pass_count = 0
        self.post_commands: List[PostCommand] = []
        self.merge_reports: List[MergeReport] = []

    def run(
        self,
        schema: Schema,
        schema_version: str,
        mode: GenerationMode = GenerationMode.MODULE,
    ) -> GenerationOutcome:
        """
        Generate, merge and regenerate until convergence.

        Raises:
            GenerationError: A pass failed (carries the pass number), or
                ConvergenceError at the ceiling with fail_on_ceiling
            MergeError: An overlay could not be applied
            PostProcessError: A post command failed
        """
        if self.state != ControllerState.IDLE:
            raise RuntimeError(f"Controller already used (state: {self.state.value})")

        if mode == GenerationMode.CLIENT:
            generate = self.generator.generate_client
        else:
            generate = self.generator.generate_module

        ceiling_reached = False
        try:
            while True:
                generated = self._generate(generate, schema, schema_version)
                self._merge(generated)

                if not generated.need_regenerate:
                    break

                if self.pass_count >= self.max_passes:
                    ceiling_reached = True
                    message = (
                        f"{self.generator.language_name} generation still needs "
                        f"another pass after {self.pass_count} pass(es)"
                    )
                    if self.fail_on_ceiling:
                        raise ConvergenceError(message, self.pass_count)
                    logger.warning("%s; treating output as converged", message)
                    break

                logger.info("Pass %d requested regeneration", self.pass_count)
                self._emit(f"regenerating (pass {self.pass_count + 1})")
        except BaseException:
            self._transition(ControllerState.FAILED)
            raise

        self._transition(ControllerState.CONVERGED)
        outcome = GenerationOutcome(
            passes=self.pass_count,
            post_commands=list(self.post_commands),
            merge_reports=list(self.merge_reports),
            ceiling_reached=ceiling_reached,
        )

        if self.executor is not None:
            try:
                outcome.post_report = run_post_commands(
                    self.post_commands, self.executor, self.log_writer
                )
            except PostProcessError:
                self._transition(ControllerState.FAILED)
                raise

        return outcome

    def _generate(self, generate, schema: Schema, schema_version: str) -> GeneratedState:
        self.pass_count += 1
        self._transition(ControllerState.GENERATING)
        logger.debug(
            "Pass %d: generating %s code", self.pass_count, self.generator.language_name
        )
        try:
            return generate(schema, schema_version)
        except GenerationError as e:
            logger.error("Generation failed in pass %d: %s", self.pass_count, e.cause)
            raise e.with_pass(self.pass_count)

    def _merge(self, generated: GeneratedState) -> None:
        self._transition(ControllerState.MERGING)
        try:
            report = self.merge(generated.overlay, self.output, self.log_writer)
        except MergeError as e:
            raise e.with_pass(self.pass_count)

        self.merge_reports.append(report)
        self.post_commands.extend(generated.post_commands)

    def _transition(self, state: ControllerState) -> None:
        logger.debug("Controller state: %s -> %s", self.state.value, state.value)
        self.state = state

    def _emit(self, line: str) -> None:
        if self.log_writer is not None:
            self.log_writer.write(line + "\n")
