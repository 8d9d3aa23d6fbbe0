"""Data models for roll-markdown."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class TaskState(str, Enum):
    """Checkbox states recognised inside ``- [ ]`` markers.

    The value of each member is the single character written between the
    brackets. Characters outside this set are still legal task states; they
    are carried through as plain strings.

    Attributes:
        TODO: ``[ ]``, not started.
        IN_PROGRESS: ``[/]``, started.
        DONE: ``[x]``, finished.
    """

    TODO = " "
    IN_PROGRESS = "/"
    DONE = "x"

    @classmethod
    def coerce(cls, char: str) -> TaskState | str:
        """Return the matching member for `char`, or `char` itself when unknown.

        Examples:
            TaskState.coerce("/")  # TaskState.IN_PROGRESS
            TaskState.coerce("?")  # "?"
        """
        try:
            return cls(char)
        except ValueError:
            return char

    def next_state(self) -> TaskState:
        """Advance through the tri-state cycle ``[ ] -> [/] -> [x] -> [ ]``."""
        return _NEXT_STATE[self]


_NEXT_STATE = {
    TaskState.TODO: TaskState.IN_PROGRESS,
    TaskState.IN_PROGRESS: TaskState.DONE,
    TaskState.DONE: TaskState.TODO,
}

INCOMPLETE_STATES = frozenset({TaskState.TODO.value, TaskState.IN_PROGRESS.value})


@dataclass(frozen=True)
class Task:
    """One checklist item.

    Attributes:
        line_index: Zero-based source line number at parse time.
        state: Character between the brackets (see `TaskState`).
        text: Content after the checkbox marker, verbatim.
        indent: Exact whitespace preceding the list marker.
    """

    line_index: int
    state: str
    text: str
    indent: str = ""

    @property
    def is_incomplete(self) -> bool:
        return self.state in INCOMPLETE_STATES


@dataclass(frozen=True)
class Section:
    """A run of zero or more headers followed by the tasks they introduce.

    Attributes:
        headers: Raw header lines in source order.
        tasks: Tasks in source order.
    """

    headers: tuple[str, ...] = ()
    tasks: tuple[Task, ...] = ()


@dataclass
class ParserContext:
    """Mutable state while walking a document line by line.

    Attributes:
        headers: Headers collected for the section being built.
        tasks: Tasks collected for the section being built.
    """

    headers: list[str] = field(default_factory=list)
    tasks: list[Task] = field(default_factory=list)

    def finalize(self) -> Section | None:
        """Freeze the section being built; header-only groups yield None."""
        if not self.tasks:
            return None
        return Section(headers=tuple(self.headers), tasks=tuple(self.tasks))


class PageType(str, Enum):
    """Closed set of rolling pages."""

    NOW = "now"
    NEXT = "next"


@dataclass(frozen=True)
class PageConfig:
    """Registry entry for a page type.

    Attributes:
        filename: Canonical file name inside the roll folder.
        display_name: Human-readable name used in notices and archive names.
        preserve_structure: Keep headers and indentation when rolling over.
    """

    filename: str
    display_name: str
    preserve_structure: bool


PAGE_CONFIG: dict[PageType, PageConfig] = {
    PageType.NOW: PageConfig(filename="Now.md", display_name="Now", preserve_structure=True),
    PageType.NEXT: PageConfig(filename="Next.md", display_name="Next", preserve_structure=False),
}


@dataclass
class PageInfo:
    """An existing page and its frontmatter dates.

    Attributes:
        path: Vault-relative path of the page.
        started: ``started`` frontmatter value, or None when absent.
        ended: ``ended`` frontmatter value, or None when absent.
    """

    path: str
    started: str | None = None
    ended: str | None = None


@dataclass
class RolloverResult:
    """Outcome of rolling a page over.

    Attributes:
        page_path: Path of the freshly created page.
        archive_path: Path the previous page was moved to.
        rolled_tasks: Number of unfinished tasks carried forward.
    """

    page_path: str
    archive_path: str
    rolled_tasks: int
