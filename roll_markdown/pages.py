"""Page lifecycle: creating, rolling over and archiving rolling pages."""

from __future__ import annotations

import logging

from .config import RollConfig
from .constants import ENDED_KEY, STARTED_KEY, TEMP_PAGE_SUFFIX
from .exceptions import FrontmatterError, PageNotFoundError, RollError, StoreError
from .filenames import format_archived_file_name, is_in_roll_folder, join_path
from .filesystem import DocumentStore
from .models import PAGE_CONFIG, PageInfo, PageType, RolloverResult
from .parser import parse_sections, split_lines
from .tasks import count_tasks, filter_incomplete, toggle_task_line
from .templates import build_page_template, coerce_page_type

logger = logging.getLogger(__name__)


class PageManager:
    """Create, open and roll over the pages kept in the roll folder.

    Args:
        store: Document store holding the vault.
        config: Folder settings for this vault.

    Examples:
        manager = PageManager(FileSystemStore(Path.cwd()), RollConfig())
        manager.rollover("now", today="2024-12-18")
    """

    def __init__(self, store: DocumentStore, config: RollConfig):
        self.store = store
        self.config = config

    def file_path(self, page_type: PageType | str) -> str:
        filename = PAGE_CONFIG[coerce_page_type(page_type)].filename
        return join_path(self.config.roll_folder, filename)

    def archive_path(self) -> str:
        return join_path(self.config.roll_folder, self.config.archive_folder)

    def detect_page_type(self, path: str) -> PageType | None:
        """Return the page type whose file in the roll folder is `path`, if any.

        Examples:
            manager.detect_page_type("Roll/Now.md")  # PageType.NOW
            manager.detect_page_type("Elsewhere/Now.md")  # None
        """
        path = path.strip()
        for page_type in PAGE_CONFIG:
            if path == self.file_path(page_type):
                return page_type
        return None

    def get_page(self, page_type: PageType | str) -> PageInfo | None:
        """Look up a page and its frontmatter dates.

        Frontmatter that is not valid YAML is logged and treated as absent,
        so the page still opens and rolls over without dates.

        Returns:
            PageInfo | None: The page, or None when it does not exist yet.
        """
        path = self.file_path(page_type)
        if not self.store.exists(path):
            return None
        try:
            metadata = self.store.read_metadata(path)
        except FrontmatterError as error:
            logger.warning("Ignoring invalid frontmatter in %s: %s", path, error)
            return PageInfo(path=path)
        return PageInfo(
            path=path,
            started=_as_optional_str(metadata.get(STARTED_KEY)),
            ended=_as_optional_str(metadata.get(ENDED_KEY)),
        )

    def create(self, page_type: PageType | str, today: str) -> PageInfo:
        """Create a page from its default template.

        Raises:
            PageExistsError: If the page already exists.
        """
        page_type = coerce_page_type(page_type)
        path = self.file_path(page_type)

        self.store.ensure_folder(self.config.roll_folder)
        self.store.create(path, build_page_template(page_type, today))
        logger.info("Created new %s page at %s", PAGE_CONFIG[page_type].display_name, path)
        return PageInfo(path=path, started=today)

    def open(self, page_type: PageType | str, today: str) -> tuple[PageInfo, bool]:
        """Return the page, creating it first when missing.

        Returns:
            tuple[PageInfo, bool]: The page and whether it was just created.
        """
        page = self.get_page(page_type)
        if page is not None:
            return page, False
        return self.create(page_type, today), True

    def rollover(self, page_type: PageType | str, today: str) -> RolloverResult:
        """Archive the current page and replace it with its unfinished tasks.

        The new page is written under a temporary name first, so the current
        page is untouched until its replacement exists. The old page then
        gets an ``ended`` date, moves to the archive folder under a unique
        name, and the temporary page takes its place.

        Args:
            page_type: Page to roll over.
            today: ISO date used as the new ``started`` and the old ``ended``.

        Returns:
            RolloverResult: Paths involved and the number of tasks carried over.

        Raises:
            PageNotFoundError: If there is no page to roll over.
            StoreError: If the store cannot create, move or rename a page. The
                temporary page is removed before the error propagates.
        """
        page_type = coerce_page_type(page_type)
        display_name = PAGE_CONFIG[page_type].display_name
        page = self.get_page(page_type)
        if page is None:
            raise PageNotFoundError(self.file_path(page_type))

        content = self.store.read_text(page.path)
        rolled_sections = filter_incomplete(parse_sections(content))

        temp_path = join_path(self.config.roll_folder, f"{display_name}{TEMP_PAGE_SUFFIX}")
        template = build_page_template(page_type, today, rolled_sections)
        self.store.create(temp_path, template)

        try:
            self._mark_as_ended(page.path, today)
            archive_path = self._archive(page_type, page.path, page.started or today, today)
            self.store.rename(temp_path, page.path)
        except (RollError, StoreError):
            self._discard_temp_page(temp_path)
            raise

        rolled_tasks = count_tasks(rolled_sections)
        logger.info(
            "Rolled over %s: archived to %s, %d task(s) carried forward",
            display_name,
            archive_path,
            rolled_tasks,
        )
        return RolloverResult(
            page_path=page.path, archive_path=archive_path, rolled_tasks=rolled_tasks
        )

    def toggle(self, path: str, line_index: int) -> str:
        """Cycle the checkbox on one line of a page in the roll folder.

        Args:
            path: Vault-relative page path.
            line_index: Zero-based line number of the task.

        Returns:
            str: The rewritten line.

        Raises:
            ValueError: If the page is outside the roll folder, the line number
                is out of range, or the line is not a task.
        """
        if not is_in_roll_folder(path, self.config.roll_folder):
            raise ValueError(f"{path} is not inside the roll folder.")

        content = self.store.read_text(path)
        lines = content.split("\n")
        if not 0 <= line_index < len(lines):
            raise ValueError(f"Line {line_index + 1} is out of range for {path}.")

        line = split_lines(lines[line_index])[0]
        toggled = toggle_task_line(line)
        if toggled is None:
            raise ValueError(f"Line {line_index + 1} of {path} is not a task.")

        ending = "\r" if lines[line_index].endswith("\r") else ""
        lines[line_index] = toggled + ending
        self.store.write_text(path, "\n".join(lines))
        return toggled

    def _mark_as_ended(self, path: str, today: str) -> None:
        try:
            metadata = self.store.read_metadata(path)
            if metadata.get(STARTED_KEY) and not metadata.get(ENDED_KEY):
                self.store.write_metadata(path, {ENDED_KEY: today})
        except (RollError, StoreError):
            logger.exception("Error marking %s as ended", path)

    def _discard_temp_page(self, temp_path: str) -> None:
        try:
            if self.store.exists(temp_path):
                self.store.delete(temp_path)
        except StoreError:
            logger.exception("Could not remove temporary page %s", temp_path)

    def _archive(self, page_type: PageType, path: str, started: str, ended: str) -> str:
        archive_folder = self.archive_path()
        self.store.ensure_folder(archive_folder)

        counter = 1
        archived_path = join_path(
            archive_folder, format_archived_file_name(page_type, started, ended)
        )
        while self.store.exists(archived_path):
            counter += 1
            archived_path = join_path(
                archive_folder, format_archived_file_name(page_type, started, ended, counter)
            )

        self.store.rename(path, archived_path)
        return archived_path


def _as_optional_str(value: object) -> str | None:
    if value is None or value == "":
        return None
    return str(value)
