"""
Error taxonomy for the code generation pipeline.

Every failure surfaced to a caller is a CodegenError subclass, so callers
can catch the whole family at once or single out one stage.
"""

from typing import List, Optional, Sequence


class CodegenError(Exception):
    """Base exception for all code generation pipeline errors."""

    pass


class ConfigError(CodegenError):
    """Exception raised for configuration-related errors."""

    pass


class IntrospectionError(CodegenError):
    """Schema introspection failed (transport, HTTP, or query error)."""

    pass


class GenerationError(CodegenError):
    """
    A backend could not produce a generated state.

    Covers malformed schemas, unsupported configuration combinations and
    template rendering failures.
    """

    def __init__(self, message: str, pass_number: Optional[int] = None):
        self.cause = message
        self.pass_number = pass_number
        super().__init__(self._format())

    def _format(self) -> str:
        if self.pass_number is None:
            return self.cause
        return f"pass {self.pass_number}: {self.cause}"

    def with_pass(self, pass_number: int) -> "GenerationError":
        """Record the pass this error happened in and return self."""
        self.pass_number = pass_number
        self.args = (self._format(),)
        return self


class ConvergenceError(GenerationError):
    """Generation still requested another pass after the pass ceiling."""

    pass


class MergeError(CodegenError):
    """Applying an overlay onto the output directory failed."""

    def __init__(self, path: str, message: str, pass_number: Optional[int] = None):
        self.path = path
        self.pass_number = pass_number
        self.reason = message
        super().__init__(self._format())

    def _format(self) -> str:
        prefix = f"pass {self.pass_number}: " if self.pass_number is not None else ""
        return f"{prefix}merge {self.path}: {self.reason}"

    def with_pass(self, pass_number: int) -> "MergeError":
        """Record the pass this error happened in and return self."""
        self.pass_number = pass_number
        self.args = (self._format(),)
        return self


class PostProcessError(CodegenError):
    """A post-processing command exited with an error."""

    def __init__(
        self,
        index: int,
        command: str,
        returncode: Optional[int],
        stderr: str = "",
        completed: Optional[Sequence[str]] = None,
    ):
        self.index = index
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        self.completed: List[str] = list(completed or [])

        if returncode is None:
            detail = "did not complete"
        else:
            detail = f"exited with code {returncode}"
        message = f"post command #{index + 1} ({command}) {detail}"
        if stderr:
            message += f": {stderr}"
        super().__init__(message)
