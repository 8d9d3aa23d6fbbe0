"""YAML frontmatter for page metadata (``started`` / ``ended``)."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime
from typing import Any

import yaml

from .constants import DATE_PATTERN, FRONTMATTER_DELIMITER
from .exceptions import FrontmatterError


def split_frontmatter(text: str) -> tuple[str | None, str]:
    """Separate a leading ``---`` block from the rest of the document.

    Returns:
        tuple[str | None, str]: The YAML between the delimiters (None when the
            document has no frontmatter) and the remaining body, which starts
            right after the closing delimiter line.
    """
    lines = text.split("\n")
    if not lines or lines[0].rstrip("\r") != FRONTMATTER_DELIMITER:
        return None, text

    for index in range(1, len(lines)):
        if lines[index].rstrip("\r") == FRONTMATTER_DELIMITER:
            yaml_text = "\n".join(lines[1:index])
            body = "\n".join(lines[index + 1 :])
            return yaml_text, body

    return None, text


def _to_plain(value: Any) -> Any:
    # YAML turns bare dates into date objects; callers expect ISO strings.
    if isinstance(value, datetime):
        return value.date().isoformat() if value.time() == datetime.min.time() else value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value


def _to_yaml(value: Any) -> Any:
    # Keep ISO dates unquoted on output.
    if isinstance(value, str) and DATE_PATTERN.match(value):
        try:
            return date.fromisoformat(value)
        except ValueError:
            return value
    return value


def read_frontmatter(text: str, path: str | None = None) -> dict[str, Any]:
    """Decode a document's frontmatter into a plain mapping.

    Args:
        text: Full page text.
        path: Page path, used only in error messages.

    Returns:
        dict[str, Any]: Frontmatter keys; empty when the page has none.

    Raises:
        FrontmatterError: If the block is not valid YAML or not a mapping.
    """
    yaml_text, _ = split_frontmatter(text)
    if yaml_text is None or not yaml_text.strip():
        return {}

    try:
        data = yaml.safe_load(yaml_text)
    except yaml.YAMLError as error:
        raise FrontmatterError(str(error), path) from error

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise FrontmatterError("expected a mapping", path)
    return {str(key): _to_plain(value) for key, value in data.items()}


def render_frontmatter(data: dict[str, Any]) -> str:
    """Render a mapping as a ``---`` delimited YAML block ending with a newline."""
    if not data:
        return f"{FRONTMATTER_DELIMITER}\n{FRONTMATTER_DELIMITER}\n"
    fm_yaml = yaml.safe_dump(
        {key: _to_yaml(value) for key, value in data.items()},
        sort_keys=False,
        allow_unicode=True,
    ).rstrip()
    return f"{FRONTMATTER_DELIMITER}\n{fm_yaml}\n{FRONTMATTER_DELIMITER}\n"


def update_frontmatter(
    text: str,
    mutate: Callable[[dict[str, Any]], None],
    path: str | None = None,
) -> str:
    """Apply `mutate` to a document's frontmatter and return the new text.

    The body is kept byte for byte. A document without frontmatter gains a
    block when `mutate` adds keys.

    Raises:
        FrontmatterError: If the existing frontmatter cannot be decoded.
    """
    data = read_frontmatter(text, path)
    mutate(data)

    yaml_text, body = split_frontmatter(text)
    if yaml_text is None:
        if not data:
            return text
        return render_frontmatter(data) + text
    return render_frontmatter(data) + body
