"""
roll-markdown: rolling Now / Next task pages for markdown notes.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    roll open now
    roll rollover now

Library Usage:
    from roll_markdown import build_page_template, filter_incomplete, parse_sections

    sections = filter_incomplete(parse_sections(content))
    new_page = build_page_template("now", "2024-12-18", sections)
"""

from .config import ConfigError, RollConfig
from .exceptions import (
    FrontmatterError,
    PageExistsError,
    PageNotFoundError,
    RollError,
    StoreError,
)
from .filenames import compare_dates, format_archived_file_name, is_valid_date_format
from .generator import flatten_sections, section_to_lines, sections_to_body, task_to_markdown
from .models import PAGE_CONFIG, PageType, Section, Task, TaskState
from .parser import is_header, match_task_line, parse_sections, parse_task_line, parse_tasks
from .tasks import filter_incomplete, next_task_state, toggle_task_line
from .templates import build_page_template

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "parse_sections",
    "parse_tasks",
    "parse_task_line",
    "match_task_line",
    "is_header",
    "filter_incomplete",
    "next_task_state",
    "toggle_task_line",
    "task_to_markdown",
    "section_to_lines",
    "sections_to_body",
    "flatten_sections",
    "build_page_template",
    # Data models
    "PAGE_CONFIG",
    "PageType",
    "Section",
    "Task",
    "TaskState",
    "RollConfig",
    # Utilities
    "compare_dates",
    "format_archived_file_name",
    "is_valid_date_format",
    # Exceptions
    "ConfigError",
    "FrontmatterError",
    "PageExistsError",
    "PageNotFoundError",
    "RollError",
    "StoreError",
    # Version
    "__version__",
]
