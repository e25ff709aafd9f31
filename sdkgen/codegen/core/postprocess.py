"""
Post-processing commands.

Backends describe follow-up work (``go mod tidy``, ``npm install``) as
plain data. Nothing runs until generation has converged; then the
accumulated commands are executed in order and the first failure stops
the sequence.
"""

from __future__ import annotations

import shlex
import subprocess
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Mapping, Sequence, TextIO

from .errors import PostProcessError
from ...logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class PostCommand:
    """An external command to run after generation."""

    program: str
    args: tuple[str, ...] = ()
    cwd: str | None = None
    env: Mapping[str, str] | None = field(default=None, compare=False)

    def __post_init__(self):
        if not isinstance(self.args, tuple):
            object.__setattr__(self, "args", tuple(self.args))

    @property
    def argv(self) -> list[str]:
        return [self.program, *self.args]

    def describe(self) -> str:
        command = shlex.join(self.argv)
        return f"{command} (in {self.cwd})" if self.cwd else command


@dataclass
class CommandResult:
    command: PostCommand
    returncode: int | None
    stdout: str = ""
    stderr: str = ""
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandExecutor(ABC):
    """Runs one post command and reports how it went."""

    @abstractmethod
    def execute(self, command: PostCommand) -> CommandResult:
        """Run ``command``; a non-zero or None returncode means failure."""


class SubprocessExecutor(CommandExecutor):
    """Run commands as local subprocesses."""

    def __init__(self, timeout: float | None = 600):
        self.timeout = timeout

    def execute(self, command: PostCommand) -> CommandResult:
        logger.debug("Executing: %s", command.describe())
        start = time.monotonic()

        try:
            completed = subprocess.run(
                command.argv,
                cwd=command.cwd,
                env=dict(command.env) if command.env is not None else None,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            return CommandResult(
                command,
                returncode=None,
                stderr=f"timed out after {self.timeout}s",
                duration_ms=int((time.monotonic() - start) * 1000),
            )
        except OSError as e:
            return CommandResult(command, returncode=None, stderr=str(e))

        return CommandResult(
            command,
            returncode=completed.returncode,
            stdout=completed.stdout.strip(),
            stderr=completed.stderr.strip(),
            duration_ms=int((time.monotonic() - start) * 1000),
        )


class NoopExecutor(CommandExecutor):
    """Record commands without running them (dry runs and tests)."""

    def __init__(self):
        self.executed: list[PostCommand] = []

    def execute(self, command: PostCommand) -> CommandResult:
        self.executed.append(command)
        return CommandResult(command, returncode=0)


@dataclass
class PostProcessReport:
    results: list[CommandResult] = field(default_factory=list)

    @property
    def completed(self) -> list[PostCommand]:
        return [r.command for r in self.results if r.ok]


def run_post_commands(
    commands: Sequence[PostCommand],
    executor: CommandExecutor,
    log_writer: TextIO | None = None,
) -> PostProcessReport:
    """Run commands in order, stopping at the first failure.

    Args:
        commands: Commands accumulated across generation passes.
        executor: How to run each command.
        log_writer: Optional text stream receiving one line per command.

    Returns:
        Report with the result of every command.

    Raises:
        PostProcessError: Naming the failed command, its position and the
            commands that completed before it.
    """
    report = PostProcessReport()

    for index, command in enumerate(commands):
        line = f"running {command.describe()}"
        logger.info(line)
        if log_writer is not None:
            log_writer.write(line + "\n")

        result = executor.execute(command)
        report.results.append(result)

        if not result.ok:
            logger.error(
                "Post command #%d failed (code %s): %s",
                index + 1,
                result.returncode,
                command.describe(),
            )
            raise PostProcessError(
                index=index,
                command=command.describe(),
                returncode=result.returncode,
                stderr=result.stderr,
                completed=[c.describe() for c in report.completed],
            )

    logger.info("Ran %d post command(s)", len(report.results))
    return report
