"""Markdown rendering for parsed sections and tasks."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from .models import Section, Task


def task_to_markdown(task: Task) -> str:
    """Render a task as ``<indent>- [<state>] <text>``."""
    return f"{task.indent}- [{task.state}] {task.text}"


def section_to_lines(section: Section) -> list[str]:
    """Render a section as its headers followed by its tasks, one line each."""
    return [*section.headers, *(task_to_markdown(task) for task in section.tasks)]


def sections_to_body(sections: Iterable[Section]) -> str:
    """Render sections while keeping headers and indentation.

    Consecutive sections are separated by exactly one blank line. The result
    has no leading or trailing blank line and no trailing newline.

    Examples:
        sections_to_body(parse_sections("### A\\n- [ ] a\\n### B\\n- [ ] b"))
        # "### A\\n- [ ] a\\n\\n### B\\n- [ ] b"
    """
    return "\n\n".join("\n".join(section_to_lines(section)) for section in sections)


def flatten_sections(sections: Iterable[Section]) -> str:
    """Render every task at root level, dropping headers and section breaks.

    Examples:
        flatten_sections(parse_sections("### A\\n  - [ ] a\\n### B\\n- [/] b"))
        # "- [ ] a\\n- [/] b"
    """
    tasks = (replace(task, indent="") for section in sections for task in section.tasks)
    return "\n".join(task_to_markdown(task) for task in tasks)
