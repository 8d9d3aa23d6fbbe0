from __future__ import annotations

import logging
from pathlib import Path

import pytest

from roll_markdown.config import RollConfig
from roll_markdown.exceptions import PageExistsError, PageNotFoundError, StoreError
from roll_markdown.filesystem import FileSystemStore
from roll_markdown.models import PageInfo, PageType
from roll_markdown.pages import PageManager

NOW_PAGE = """\
---
started: 2024-12-01
---

- [x] paid rent
- [ ] call bank

### Garden
- [/] build shed
  - [x] buy wood
  - [ ] paint

### Finished project
- [x] everything
"""


def _write(vault: Path, relative: str, content: str) -> Path:
    path = vault / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def test_file_paths(manager: PageManager):
    assert manager.file_path("now") == "Roll/Now.md"
    assert manager.file_path(PageType.NEXT) == "Roll/Next.md"
    assert manager.archive_path() == "Roll/Archive"


def test_file_paths_at_vault_root(store: FileSystemStore):
    manager = PageManager(store, RollConfig(roll_folder=""))

    assert manager.file_path("now") == "Now.md"
    assert manager.archive_path() == "Archive"


def test_detect_page_type(manager: PageManager):
    assert manager.detect_page_type("Roll/Now.md") is PageType.NOW
    assert manager.detect_page_type("Roll/Next.md") is PageType.NEXT
    assert manager.detect_page_type("Elsewhere/Next.md") is None
    assert manager.detect_page_type("Roll/Archive/Now.md") is None
    assert manager.detect_page_type("Roll/Notes.md") is None


def test_get_page_missing(manager: PageManager):
    assert manager.get_page("now") is None


def test_get_page_reads_dates(manager: PageManager, vault: Path):
    _write(vault, "Roll/Now.md", "---\nstarted: 2024-12-01\nended: 2024-12-05\n---\n")

    assert manager.get_page("now") == PageInfo(
        path="Roll/Now.md", started="2024-12-01", ended="2024-12-05"
    )


def test_create_writes_default_template(manager: PageManager, vault: Path):
    page = manager.create("now", "2024-12-18")

    assert page == PageInfo(path="Roll/Now.md", started="2024-12-18")
    content = (vault / "Roll" / "Now.md").read_text(encoding="utf-8")
    assert content.startswith("---\nstarted: 2024-12-18\n---\n")
    assert "- [/] in-progress task" in content


def test_create_refuses_existing_page(manager: PageManager):
    manager.create("now", "2024-12-18")

    with pytest.raises(PageExistsError):
        manager.create("now", "2024-12-19")


def test_open_creates_then_reuses(manager: PageManager):
    page, created = manager.open("next", "2024-12-18")
    assert created
    assert page.path == "Roll/Next.md"

    page, created = manager.open("next", "2024-12-20")
    assert not created
    assert page.started == "2024-12-18"


def test_rollover_requires_existing_page(manager: PageManager):
    with pytest.raises(PageNotFoundError):
        manager.rollover("now", "2024-12-18")


def test_rollover_now_page(manager: PageManager, vault: Path):
    _write(vault, "Roll/Now.md", NOW_PAGE)

    result = manager.rollover("now", "2024-12-18")

    assert result.page_path == "Roll/Now.md"
    assert result.archive_path == "Roll/Archive/Now 2024-12-01~2024-12-18.md"
    assert result.rolled_tasks == 3

    new_page = (vault / "Roll" / "Now.md").read_text(encoding="utf-8")
    assert new_page == (
        "---\nstarted: 2024-12-18\n---\n\n"
        "- [ ] call bank\n\n"
        "### Garden\n- [/] build shed\n  - [ ] paint\n"
    )

    archived = (vault / "Roll" / "Archive" / "Now 2024-12-01~2024-12-18.md").read_text(
        encoding="utf-8"
    )
    assert archived.startswith("---\nstarted: 2024-12-01\nended: 2024-12-18\n---\n")
    assert archived.endswith("### Finished project\n- [x] everything\n")
    assert not (vault / "Roll" / "Now.tmp.md").exists()


def test_rollover_next_page_flattens(manager: PageManager, vault: Path):
    _write(
        vault,
        "Roll/Next.md",
        "---\nstarted: 2024-12-01\n---\n\n### Later\n- [ ] one\n  - [/] two\n- [x] three\n",
    )

    manager.rollover("next", "2024-12-18")

    assert (vault / "Roll" / "Next.md").read_text(encoding="utf-8") == (
        "---\nstarted: 2024-12-18\n---\n\n- [ ] one\n- [/] two\n"
    )


def test_rollover_with_nothing_left_uses_default_template(manager: PageManager, vault: Path):
    _write(vault, "Roll/Now.md", "---\nstarted: 2024-12-01\n---\n\n- [x] all done\n")

    result = manager.rollover("now", "2024-12-18")

    assert result.rolled_tasks == 0
    assert "- [ ] new task" in (vault / "Roll" / "Now.md").read_text(encoding="utf-8")


def test_rollover_twice_same_day_adds_counter(manager: PageManager, vault: Path):
    _write(vault, "Roll/Now.md", "---\nstarted: 2024-12-18\n---\n\n- [ ] task\n")

    first = manager.rollover("now", "2024-12-18")
    second = manager.rollover("now", "2024-12-18")
    third = manager.rollover("now", "2024-12-18")

    assert first.archive_path == "Roll/Archive/Now 2024-12-18~2024-12-18.md"
    assert second.archive_path == "Roll/Archive/Now 2024-12-18~2024-12-18 (2).md"
    assert third.archive_path == "Roll/Archive/Now 2024-12-18~2024-12-18 (3).md"


def test_rollover_without_started_uses_today(manager: PageManager, vault: Path):
    _write(vault, "Roll/Now.md", "- [ ] task\n")

    result = manager.rollover("now", "2024-12-18")

    assert result.archive_path == "Roll/Archive/Now 2024-12-18~2024-12-18.md"
    archived = (vault / result.archive_path).read_text(encoding="utf-8")
    assert archived == "- [ ] task\n"


def test_rollover_keeps_existing_ended_date(manager: PageManager, vault: Path):
    _write(vault, "Roll/Now.md", "---\nstarted: 2024-12-01\nended: 2024-12-10\n---\n- [ ] a\n")

    result = manager.rollover("now", "2024-12-18")

    archived = (vault / result.archive_path).read_text(encoding="utf-8")
    assert "ended: 2024-12-10" in archived
    assert "2024-12-18" not in archived


def test_rollover_logs_when_marking_ended_fails(
    manager: PageManager, vault: Path, monkeypatch, caplog
):
    _write(vault, "Roll/Now.md", "---\nstarted: 2024-12-01\n---\n- [ ] a\n")

    def _fail(path, updates):
        raise PageNotFoundError(path)

    monkeypatch.setattr(manager.store, "write_metadata", _fail)

    with caplog.at_level(logging.ERROR, logger="roll_markdown.pages"):
        result = manager.rollover("now", "2024-12-18")

    assert (vault / result.archive_path).exists()
    assert "Error marking Roll/Now.md as ended" in caplog.text


def test_failed_rollover_removes_temporary_page(manager: PageManager, vault: Path):
    _write(vault, "Roll/Now.md", "---\nstarted: 2024-12-01\n---\n- [ ] a\n")
    blocker = _write(vault, "Roll/Archive", "not a folder\n")

    with pytest.raises(StoreError):
        manager.rollover("now", "2024-12-18")

    assert not (vault / "Roll" / "Now.tmp.md").exists()
    assert "- [ ] a" in (vault / "Roll" / "Now.md").read_text(encoding="utf-8")

    blocker.unlink()
    result = manager.rollover("now", "2024-12-18")

    assert result.archive_path == "Roll/Archive/Now 2024-12-01~2024-12-18.md"
    assert (vault / "Roll" / "Now.md").read_text(encoding="utf-8").startswith(
        "---\nstarted: 2024-12-18\n---\n"
    )


def test_get_page_ignores_invalid_frontmatter(manager: PageManager, vault: Path, caplog):
    _write(vault, "Roll/Now.md", "---\nstarted: [2024-12-01\n---\n- [ ] keep me\n")

    with caplog.at_level(logging.WARNING, logger="roll_markdown.pages"):
        page = manager.get_page("now")

    assert page == PageInfo(path="Roll/Now.md")
    assert "Ignoring invalid frontmatter in Roll/Now.md" in caplog.text


def test_rollover_page_with_invalid_frontmatter(manager: PageManager, vault: Path):
    original = "---\nstarted: [2024-12-01\n---\n- [ ] keep me\n"
    _write(vault, "Roll/Now.md", original)

    result = manager.rollover("now", "2024-12-18")

    assert result.archive_path == "Roll/Archive/Now 2024-12-18~2024-12-18.md"
    assert result.rolled_tasks == 1
    assert "- [ ] keep me" in (vault / "Roll" / "Now.md").read_text(encoding="utf-8")
    assert (vault / result.archive_path).read_text(encoding="utf-8") == original


def test_toggle_cycles_task_state(manager: PageManager, vault: Path):
    target = _write(vault, "Roll/Now.md", "### A\n- [ ] task\n")

    assert manager.toggle("Roll/Now.md", 1) == "- [/] task"
    assert manager.toggle("Roll/Now.md", 1) == "- [x] task"
    assert target.read_text(encoding="utf-8") == "### A\n- [x] task\n"
    assert manager.toggle("Roll/Now.md", 1) == "- [ ] task"


def test_toggle_preserves_crlf(manager: PageManager, vault: Path):
    target = vault / "Roll" / "Now.md"
    target.parent.mkdir(parents=True)
    target.write_bytes(b"- [ ] a\r\n- [ ] b\r\n")

    manager.toggle("Roll/Now.md", 1)

    assert target.read_bytes() == b"- [ ] a\r\n- [/] b\r\n"


@pytest.mark.parametrize(
    ("path", "line_index"),
    [
        ("Roll/Now.md", 0),
        ("Roll/Now.md", 10),
        ("Other/Now.md", 1),
    ],
)
def test_toggle_rejects_invalid_targets(
    manager: PageManager, vault: Path, path: str, line_index: int
):
    _write(vault, "Roll/Now.md", "### A\n- [ ] task\n")
    _write(vault, "Other/Now.md", "### A\n- [ ] task\n")

    with pytest.raises(ValueError):
        manager.toggle(path, line_index)
