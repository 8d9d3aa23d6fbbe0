"""Filtering and state transitions for parsed tasks."""

from __future__ import annotations

from collections.abc import Iterable

from .models import Section, Task, TaskState
from .parser import parse_task_line


def filter_incomplete_tasks(tasks: Iterable[Task]) -> list[Task]:
    """Keep only todo and in-progress tasks, in their original order."""
    return [task for task in tasks if task.is_incomplete]


def filter_incomplete(sections: Iterable[Section]) -> list[Section]:
    """Reduce sections to their unfinished tasks.

    A section's headers are kept or dropped as a whole: the section survives
    with its full header list when at least one task remains, and disappears
    otherwise. Section and task order are preserved and the inputs are not
    modified.

    Args:
        sections: Sections as produced by `parse_sections`.

    Returns:
        list[Section]: New sections holding only todo and in-progress tasks.

    Examples:
        filter_incomplete(parse_sections("### A\\n- [x] done\\n- [ ] open"))
    """
    result: list[Section] = []
    for section in sections:
        remaining = filter_incomplete_tasks(section.tasks)
        if not remaining:
            continue
        result.append(Section(headers=section.headers, tasks=tuple(remaining)))
    return result


def count_tasks(sections: Iterable[Section]) -> int:
    return sum(len(section.tasks) for section in sections)


def next_task_state(state: str) -> str:
    """Return the state that follows `state` in the ``[ ] -> [/] -> [x]`` cycle.

    Unrecognised states are returned unchanged.
    """
    known = TaskState.coerce(state)
    if isinstance(known, TaskState):
        return known.next_state().value
    return state


def toggle_task_line(line: str) -> str | None:
    """Advance the checkbox on a single line to its next state.

    Args:
        line: Source line, without its line ending.

    Returns:
        str | None: The rewritten line, or None when `line` is not a task.

    Examples:
        toggle_task_line("  - [/] draft")  # "  - [x] draft"
    """
    parsed = parse_task_line(line)
    if parsed is None:
        return None
    return parsed.with_state(next_task_state(parsed.state))
