"""Markdown parsing utilities."""

from __future__ import annotations

from dataclasses import dataclass

from .constants import HEADER_PATTERN, TASK_LINE_PATTERN, TASK_PATTERN
from .models import ParserContext, Section, Task


@dataclass(frozen=True)
class TaskLine:
    """A task line split around its state character.

    Attributes:
        prefix: Everything up to and including ``[``.
        state: The single character between the brackets.
        suffix: Everything from ``]`` to the end of the line.
    """

    prefix: str
    state: str
    suffix: str

    def with_state(self, state: str) -> str:
        return f"{self.prefix}{state}{self.suffix}"


def split_lines(content: str) -> list[str]:
    """Split document text on ``\\n``, dropping a trailing ``\\r`` from each line."""
    return [line[:-1] if line.endswith("\r") else line for line in content.split("\n")]


def is_header(line: str) -> bool:
    """Check whether a line is an ATX header (levels 1-6, column 0 only).

    Examples:
        is_header("### Project")  # True
        is_header("  ## Indented")  # False
        is_header("#######  Too deep")  # False
    """
    return HEADER_PATTERN.match(line) is not None


def match_task_line(line: str) -> tuple[str, str, str] | None:
    """Extract ``(indent, state, text)`` from a task line.

    The state is whatever single character sits between the brackets; it is
    not checked against the known states. Only one space after ``]`` is
    consumed, so the text is otherwise verbatim.

    Args:
        line: A single line without its line ending.

    Returns:
        tuple[str, str, str] | None: Indent, state and text, or None when the
            line is not a task.

    Examples:
        match_task_line("  - [/] write docs")  # ("  ", "/", "write docs")
        match_task_line("- plain item")  # None
    """
    match = TASK_PATTERN.match(line)
    if match is None:
        return None
    return match.group("indent"), match.group("state"), match.group("text")


def parse_task_line(line: str) -> TaskLine | None:
    """Split a task line into prefix, state and suffix for in-place edits.

    Examples:
        parse_task_line("  - [x] nested")  # TaskLine("  - [", "x", "] nested")
        parse_task_line("# Header")  # None
    """
    match = TASK_LINE_PATTERN.match(line)
    if match is None:
        return None
    return TaskLine(
        prefix=match.group("prefix"),
        state=match.group("state"),
        suffix=match.group("suffix"),
    )


def parse_tasks(content: str) -> list[Task]:
    """Return every task in `content`, in document order, ignoring headers."""
    tasks: list[Task] = []
    for line_index, line in enumerate(split_lines(content)):
        parsed = match_task_line(line)
        if parsed is None:
            continue
        indent, state, text = parsed
        tasks.append(Task(line_index=line_index, state=state, text=text, indent=indent))
    return tasks


def _handle_header(ctx: ParserContext, line: str, sections: list[Section]) -> None:
    if ctx.tasks:
        section = ctx.finalize()
        if section is not None:
            sections.append(section)
        ctx.headers = []
        ctx.tasks = []
    ctx.headers.append(line)


def _handle_task(ctx: ParserContext, task: Task) -> None:
    ctx.tasks.append(task)


def parse_sections(content: str) -> list[Section]:
    """Group a document's tasks under the headers that introduce them.

    Consecutive headers with no task between them share one section. A header
    that follows a task starts a new section. Blank lines and prose are
    skipped; prose between a header and its first task does not detach the
    header. Sections that never receive a task are dropped.

    Args:
        content: Full markdown text of a page.

    Returns:
        list[Section]: Sections in document order, each with at least one task.

    Examples:
        parse_sections("## Big\\n### Sub\\n- [ ] task")
        # [Section(headers=("## Big", "### Sub"), tasks=(Task(2, " ", "task", ""),))]
        parse_sections("### Empty\\n\\n### Also Empty\\n")  # []
    """
    sections: list[Section] = []
    ctx = ParserContext()

    for line_index, line in enumerate(split_lines(content)):
        if is_header(line):
            _handle_header(ctx, line, sections)
            continue

        parsed = match_task_line(line)
        if parsed is not None:
            indent, state, text = parsed
            _handle_task(
                ctx, Task(line_index=line_index, state=state, text=text, indent=indent)
            )

    section = ctx.finalize()
    if section is not None:
        sections.append(section)

    return sections
