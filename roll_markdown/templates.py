"""Page templates for freshly created and rolled-over pages."""

from __future__ import annotations

from collections.abc import Sequence

from .constants import FRONTMATTER_DELIMITER, STARTED_KEY
from .generator import flatten_sections, sections_to_body
from .models import PAGE_CONFIG, PageType, Section

DEFAULT_NOW_TEMPLATE_BODY = """\
- [ ] new task
- [/] in-progress task

### Project title
- [ ] project task
- [x] completed task"""

DEFAULT_NEXT_TEMPLATE_BODY = """\
- [ ] task coming up soon
- [ ] another task coming up later"""

DEFAULT_TEMPLATE_BODIES: dict[PageType, str] = {
    PageType.NOW: DEFAULT_NOW_TEMPLATE_BODY,
    PageType.NEXT: DEFAULT_NEXT_TEMPLATE_BODY,
}


def coerce_page_type(page_type: PageType | str) -> PageType:
    """Accept a `PageType` or its string value.

    Raises:
        ValueError: If `page_type` names no known page.
    """
    try:
        return PageType(page_type)
    except ValueError as error:
        known = ", ".join(member.value for member in PageType)
        raise ValueError(f"Unknown page type {page_type!r} (expected one of: {known})") from error


def build_frontmatter(start_date: str) -> str:
    """Render the metadata block opening every page.

    `start_date` is written as given; validating it is the caller's job.
    """
    return f"{FRONTMATTER_DELIMITER}\n{STARTED_KEY}: {start_date}\n{FRONTMATTER_DELIMITER}\n"


def build_page_template(
    page_type: PageType | str,
    start_date: str,
    rolled_sections: Sequence[Section] = (),
) -> str:
    """Compose the full text of a new page.

    When nothing is rolled over, the page gets its default example body. The
    Now page keeps rolled sections with their headers, indentation and the
    blank line between sections; the Next page flattens them to a plain task
    list.

    Args:
        page_type: Page being created.
        start_date: Value for the ``started`` frontmatter key.
        rolled_sections: Unfinished sections carried over from the previous page.

    Returns:
        str: Frontmatter, a blank line, then the body, ending with one newline.

    Raises:
        ValueError: If `page_type` is not a known page.

    Examples:
        build_page_template("now", "2024-12-18")
        build_page_template(PageType.NEXT, "2024-12-18", filter_incomplete(sections))
    """
    page_type = coerce_page_type(page_type)
    frontmatter = build_frontmatter(start_date)

    if not rolled_sections:
        body = DEFAULT_TEMPLATE_BODIES[page_type]
    elif PAGE_CONFIG[page_type].preserve_structure:
        body = sections_to_body(rolled_sections)
    else:
        body = flatten_sections(rolled_sections)

    return f"{frontmatter}\n{body}\n"
