"""Constants used across the roll-markdown package."""

from __future__ import annotations

import re

# Markdown patterns
# Headers start at column 0; tasks may be indented.
HEADER_PATTERN = re.compile(r"^#{1,6}\s+\S.*$")
TASK_PATTERN = re.compile(r"^(?P<indent>\s*)- \[(?P<state>[^\]])\] ?(?P<text>.*)$")
TASK_LINE_PATTERN = re.compile(r"^(?P<prefix>\s*- \[)(?P<state>[^\]])(?P<suffix>\].*)$")

# Frontmatter
FRONTMATTER_DELIMITER = "---"
STARTED_KEY = "started"
ENDED_KEY = "ended"
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Files
MARKDOWN_EXTENSION = ".md"
TEMP_PAGE_SUFFIX = ".tmp.md"
