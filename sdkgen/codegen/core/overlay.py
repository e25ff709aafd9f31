"""
Virtual output trees and the overlay merge.

Backends never touch the disk. They describe their output as an Overlay,
an in-memory tree of directories and files, and apply_overlay() writes it
onto the real output directory:

- missing directories are created, existing ones are left alone;
- a file is written only when it is absent or its bytes differ;
- nothing outside the overlay is ever modified or deleted.

Every decision is reported line by line ("writing x", "writing x
[skipped]") so users can audit what changed in their checkout.
"""

import os
import stat
import tempfile
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Dict, Iterator, List, Optional, TextIO, Union

from .errors import MergeError
from ...logging_config import get_logger

logger = get_logger(__name__)

# Mode for files that do not exist yet; existing files keep theirs
DEFAULT_FILE_MODE = 0o600
DEFAULT_DIR_MODE = 0o755


class EntryKind(Enum):
    DIRECTORY = "directory"
    FILE = "file"


@dataclass(frozen=True)
class OverlayEntry:
    """A single directory or file in a virtual output tree."""

    path: str
    kind: EntryKind
    content: bytes = b""

    @property
    def is_dir(self) -> bool:
        return self.kind == EntryKind.DIRECTORY


class Overlay:
    """In-memory output tree, keyed by relative POSIX path."""

    def __init__(self):
        self._entries: Dict[str, OverlayEntry] = {}

    @classmethod
    def from_files(cls, files: Dict[str, Union[str, bytes]]) -> "Overlay":
        """Build an overlay from a mapping of path to content."""
        overlay = cls()
        for path, content in files.items():
            overlay.add_file(path, content)
        return overlay

    @staticmethod
    def normalize(path: Union[str, PurePosixPath]) -> str:
        """
        Normalize a relative path.

        Raises:
            ValueError: If the path is empty, absolute or contains '..'
        """
        raw = str(path).replace("\\", "/")
        pure = PurePosixPath(raw)
        if pure.is_absolute():
            raise ValueError(f"Overlay paths must be relative: {path}")
        parts = [p for p in pure.parts if p != "."]
        if ".." in parts:
            raise ValueError(f"Overlay paths must not contain '..': {path}")
        if not parts:
            raise ValueError(f"Overlay path is empty: {path!r}")
        return "/".join(parts)

    def add_dir(self, path: Union[str, PurePosixPath]) -> str:
        """Add a directory and any missing parents."""
        norm = self.normalize(path)
        parts = norm.split("/")
        for i in range(1, len(parts) + 1):
            current = "/".join(parts[:i])
            existing = self._entries.get(current)
            if existing is None:
                self._entries[current] = OverlayEntry(current, EntryKind.DIRECTORY)
            elif not existing.is_dir:
                raise ValueError(f"Overlay path is a file, not a directory: {current}")
        return norm

    def add_file(
        self, path: Union[str, PurePosixPath], content: Union[str, bytes]
    ) -> str:
        """Add (or replace) a file, creating its parent directories."""
        norm = self.normalize(path)
        existing = self._entries.get(norm)
        if existing is not None and existing.is_dir:
            raise ValueError(f"Overlay path is a directory: {norm}")

        parent = PurePosixPath(norm).parent
        if str(parent) != ".":
            self.add_dir(parent)

        if isinstance(content, str):
            content = content.encode("utf-8")
        self._entries[norm] = OverlayEntry(norm, EntryKind.FILE, bytes(content))
        return norm

    def read_file(self, path: Union[str, PurePosixPath]) -> bytes:
        entry = self._entries.get(self.normalize(path))
        if entry is None or entry.is_dir:
            raise KeyError(f"No such file in overlay: {path}")
        return entry.content

    def is_dir(self, path: Union[str, PurePosixPath]) -> bool:
        entry = self._entries.get(self.normalize(path))
        return entry is not None and entry.is_dir

    def __contains__(self, path: object) -> bool:
        try:
            return self.normalize(str(path)) in self._entries
        except ValueError:
            return False

    def __len__(self) -> int:
        return len(self._entries)

    def files(self) -> List[str]:
        """Sorted paths of every file in the overlay."""
        return sorted(p for p, e in self._entries.items() if not e.is_dir)

    def walk(self) -> Iterator[OverlayEntry]:
        """
        Walk the tree in pre-order.

        A directory is yielded before its contents and siblings are
        visited in lexical order of their names, so the walk (and the
        merge log) is reproducible. The root itself is not yielded.
        """
        children: Dict[str, List[str]] = {}
        for path in self._entries:
            parent = str(PurePosixPath(path).parent)
            children.setdefault("" if parent == "." else parent, []).append(path)

        def visit(directory: str) -> Iterator[OverlayEntry]:
            names = sorted(
                children.get(directory, []), key=lambda p: p.rsplit("/", 1)[-1]
            )
            for path in names:
                entry = self._entries[path]
                yield entry
                if entry.is_dir:
                    yield from visit(path)

        return visit("")


class OverlayTarget(ABC):
    """Where an overlay gets applied. Paths are overlay-relative."""

    def prepare(self) -> None:
        """Make the target root usable before the first entry is applied."""

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Whether anything exists at path."""

    @abstractmethod
    def read_bytes(self, path: str) -> Optional[bytes]:
        """Current content of the file at path, or None if absent."""

    @abstractmethod
    def write_bytes(self, path: str, content: bytes) -> None:
        """Replace the full content of the file at path."""

    @abstractmethod
    def makedirs(self, path: str) -> None:
        """Create the directory at path, with parents."""

    def describe(self) -> str:
        return self.__class__.__name__


class DirectoryTarget(OverlayTarget):
    """A real directory on the local filesystem."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def describe(self) -> str:
        return str(self.root)

    def prepare(self) -> None:
        try:
            os.makedirs(self.root, mode=DEFAULT_DIR_MODE, exist_ok=True)
        except OSError as e:
            raise MergeError(
                ".", f"cannot create output directory {self.root}: {e}"
            ) from e

    def resolve(self, path: str) -> Path:
        """
        Map an overlay path to a location under the root.

        Raises:
            MergeError: If the location resolves outside the root
                (for instance through a symlink)
        """
        root = os.path.realpath(self.root)
        full = os.path.realpath(os.path.join(root, path))
        if full != root and not full.startswith(root + os.sep):
            raise MergeError(path, f"resolves outside of output directory {self.root}")
        return Path(full)

    def exists(self, path: str) -> bool:
        return os.path.lexists(os.path.join(self.root, path))

    def read_bytes(self, path: str) -> Optional[bytes]:
        full = self.resolve(path)
        if full.is_dir():
            raise MergeError(path, "is a directory on disk but a file in the overlay")
        try:
            return full.read_bytes()
        except FileNotFoundError:
            return None

    def write_bytes(self, path: str, content: bytes) -> None:
        full = self.resolve(path)

        try:
            mode = stat.S_IMODE(os.stat(full).st_mode)
        except FileNotFoundError:
            mode = DEFAULT_FILE_MODE

        # Write to a sibling temp file and rename it over the target so a
        # concurrent reader sees either the old or the new content.
        fd, tmp = tempfile.mkstemp(
            dir=full.parent, prefix=f".{full.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(content)
            os.chmod(tmp, mode)
            os.replace(tmp, full)
        finally:
            if os.path.exists(tmp):
                os.unlink(tmp)

    def makedirs(self, path: str) -> None:
        os.makedirs(self.resolve(path), mode=DEFAULT_DIR_MODE, exist_ok=True)


class MergeAction(Enum):
    CREATE_DIRECTORY = "creating directory"
    WRITE_FILE = "writing"


@dataclass(frozen=True)
class MergeDecision:
    """What apply_overlay() decided for one overlay entry."""

    action: MergeAction
    path: str
    skipped: bool

    def __str__(self) -> str:
        line = f"{self.action.value} {self.path}"
        return f"{line} [skipped]" if self.skipped else line


@dataclass
class MergeReport:
    """Every decision taken while applying an overlay, in walk order."""

    decisions: List[MergeDecision] = field(default_factory=list)

    def _select(self, action: MergeAction, skipped: bool) -> List[str]:
        return [
            d.path
            for d in self.decisions
            if d.action == action and d.skipped == skipped
        ]

    @property
    def dirs_created(self) -> List[str]:
        return self._select(MergeAction.CREATE_DIRECTORY, False)

    @property
    def dirs_skipped(self) -> List[str]:
        return self._select(MergeAction.CREATE_DIRECTORY, True)

    @property
    def files_written(self) -> List[str]:
        return self._select(MergeAction.WRITE_FILE, False)

    @property
    def files_skipped(self) -> List[str]:
        return self._select(MergeAction.WRITE_FILE, True)

    @property
    def changed(self) -> bool:
        return any(not d.skipped for d in self.decisions)

    def lines(self) -> List[str]:
        return [str(d) for d in self.decisions]

    def summary(self) -> str:
        return (
            f"{len(self.dirs_created)} directories created, "
            f"{len(self.files_written)} files written, "
            f"{len(self.dirs_skipped) + len(self.files_skipped)} unchanged"
        )


def apply_overlay(
    overlay: Overlay,
    output: Union[str, Path, OverlayTarget],
    log_writer: Optional[TextIO] = None,
) -> MergeReport:
    """
    Apply a virtual output tree onto the output directory.

    Args:
        overlay: Tree produced by a generation pass
        output: Output directory path, or any OverlayTarget
        log_writer: Text stream receiving one line per decision

    Returns:
        MergeReport listing every create / write / skip decision

    Raises:
        MergeError: On the first entry that cannot be applied. Entries
            applied before it stay on disk.
    """
    target = output if isinstance(output, OverlayTarget) else DirectoryTarget(output)
    report = MergeReport()

    logger.debug("Applying overlay of %d entries to %s", len(overlay), target.describe())
    target.prepare()

    for entry in overlay.walk():
        try:
            if entry.is_dir:
                decision = _apply_dir(target, entry)
            else:
                decision = _apply_file(target, entry)
        except MergeError:
            raise
        except OSError as e:
            logger.error("Failed to apply %s: %s", entry.path, e)
            raise MergeError(entry.path, e.strerror or str(e)) from e

        report.decisions.append(decision)
        _emit(log_writer, str(decision))

    logger.info("Overlay applied to %s: %s", target.describe(), report.summary())
    return report


def _apply_dir(target: OverlayTarget, entry: OverlayEntry) -> MergeDecision:
    if target.exists(entry.path):
        return MergeDecision(MergeAction.CREATE_DIRECTORY, entry.path, skipped=True)
    target.makedirs(entry.path)
    return MergeDecision(MergeAction.CREATE_DIRECTORY, entry.path, skipped=False)


def _apply_file(target: OverlayTarget, entry: OverlayEntry) -> MergeDecision:
    if target.read_bytes(entry.path) == entry.content:
        return MergeDecision(MergeAction.WRITE_FILE, entry.path, skipped=True)
    target.write_bytes(entry.path, entry.content)
    return MergeDecision(MergeAction.WRITE_FILE, entry.path, skipped=False)


def _emit(log_writer: Optional[TextIO], line: str) -> None:
    logger.debug(line)
    if log_writer is not None:
        log_writer.write(line + "\n")
