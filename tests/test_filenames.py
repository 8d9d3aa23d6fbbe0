from __future__ import annotations

import re

import pytest

from roll_markdown.filenames import (
    compare_dates,
    format_archived_file_name,
    is_in_roll_folder,
    is_valid_date_format,
    join_path,
    today_iso,
)
from roll_markdown.models import PageType


def test_format_archived_file_name():
    assert format_archived_file_name("now", "2024-12-01", "2024-12-18") == (
        "Now 2024-12-01~2024-12-18.md"
    )
    assert format_archived_file_name(PageType.NEXT, "2024-12-01", "2024-12-18") == (
        "Next 2024-12-01~2024-12-18.md"
    )


@pytest.mark.parametrize(
    ("counter", "expected"),
    [
        (None, "Now 2024-12-18~2024-12-18.md"),
        (1, "Now 2024-12-18~2024-12-18.md"),
        (2, "Now 2024-12-18~2024-12-18 (2).md"),
        (10, "Now 2024-12-18~2024-12-18 (10).md"),
    ],
)
def test_format_archived_file_name_counter(counter: int | None, expected: str):
    assert format_archived_file_name("now", "2024-12-18", "2024-12-18", counter) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("2024-12-16", True),
        ("2024-01-01", True),
        ("2024-1-1", False),
        ("12/16/2024", False),
        ("", False),
    ],
)
def test_is_valid_date_format(value: str, expected: bool):
    assert is_valid_date_format(value) is expected


def test_compare_dates():
    assert compare_dates("2024-12-15", "2024-12-16") == -1
    assert compare_dates("2024-12-16", "2024-12-15") == 1
    assert compare_dates("2024-12-16", "2024-12-16") == 0
    assert compare_dates("2023-12-31", "2024-01-01") == -1


def test_today_iso_shape():
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}", today_iso())


def test_join_path_skips_empty_segments():
    assert join_path("Roll", "Now.md") == "Roll/Now.md"
    assert join_path("", "Now.md") == "Now.md"
    assert join_path("Roll/", "/Archive", "Now 1~2.md") == "Roll/Archive/Now 1~2.md"


@pytest.mark.parametrize(
    ("file_path", "folder", "expected"),
    [
        ("Roll/Now.md", "Roll", True),
        ("Roll/Archive/Now 2024-01-01~2024-01-02.md", "Roll", True),
        ("Other/file.md", "Roll", False),
        ("Rollover/file.md", "Roll", False),
        ("file.md", "Roll", False),
        ("Now.md", "", True),
        ("Roll/Now.md", "", False),
    ],
)
def test_is_in_roll_folder(file_path: str, folder: str, expected: bool):
    assert is_in_roll_folder(file_path, folder) is expected
