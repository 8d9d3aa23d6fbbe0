"""File name and date helpers.

Dates are ISO ``YYYY-MM-DD`` strings throughout; they are compared as text,
which orders them chronologically.
"""

from __future__ import annotations

from datetime import date

from .constants import DATE_PATTERN, MARKDOWN_EXTENSION
from .models import PAGE_CONFIG, PageType


def format_archived_file_name(
    page_type: PageType | str, started: str, ended: str, counter: int | None = None
) -> str:
    """Build the archive file name for a finished page.

    Args:
        page_type: Page being archived.
        started: Date the page was started.
        ended: Date the page was rolled over.
        counter: Disambiguating number for same-day rollovers; only values
            above 1 add a suffix.

    Returns:
        str: ``"<Display> <started>~<ended>.md"`` or
            ``"<Display> <started>~<ended> (<counter>).md"``.

    Examples:
        format_archived_file_name("now", "2024-12-01", "2024-12-18")
        # "Now 2024-12-01~2024-12-18.md"
        format_archived_file_name("next", "2024-12-18", "2024-12-18", 2)
        # "Next 2024-12-18~2024-12-18 (2).md"
    """
    display_name = PAGE_CONFIG[PageType(page_type)].display_name
    stem = f"{display_name} {started}~{ended}"
    if counter is not None and counter > 1:
        stem = f"{stem} ({counter})"
    return f"{stem}{MARKDOWN_EXTENSION}"


def today_iso() -> str:
    return date.today().isoformat()


def is_valid_date_format(value: str) -> bool:
    """Check for the ``YYYY-MM-DD`` shape (digits only, no calendar check)."""
    return DATE_PATTERN.match(value) is not None


def compare_dates(date1: str, date2: str) -> int:
    """Compare two ISO date strings.

    Returns:
        int: -1 if `date1` is earlier, 1 if later, 0 if equal.
    """
    if date1 < date2:
        return -1
    if date1 > date2:
        return 1
    return 0


def join_path(*parts: str) -> str:
    """Join vault-relative path segments, skipping empty ones."""
    return "/".join(part.strip("/") for part in parts if part and part.strip("/"))


def is_in_roll_folder(file_path: str, folder_path: str) -> bool:
    """Check whether a vault-relative path lives under the roll folder.

    An empty folder means the vault root, where only top-level files count.

    Examples:
        is_in_roll_folder("Roll/Archive/Now 2024-01-01~2024-01-02.md", "Roll")  # True
        is_in_roll_folder("Roll/Now.md", "")  # False
    """
    if not folder_path:
        return "/" not in file_path
    return file_path.startswith(f"{folder_path.rstrip('/')}/")
