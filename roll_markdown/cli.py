"""
Command-line front end for rolling Now / Next pages in a markdown vault.
"""

from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path

import click
from .config import ConfigError, build_config
from .exceptions import PageNotFoundError, RollError, StoreError
from .filenames import is_valid_date_format, today_iso
from .filesystem import FileSystemStore
from .generator import flatten_sections
from .models import PAGE_CONFIG, PageType, TaskState
from .pages import PageManager
from .parser import parse_sections, parse_tasks
from .tasks import filter_incomplete
from .templates import build_page_template

__all__ = ["cli"]

PAGE_TYPE_CHOICE = click.Choice([page_type.value for page_type in PageType])


def _display_name(page_type: str) -> str:
    return PAGE_CONFIG[PageType(page_type)].display_name


def _validate_date(ctx: click.Context, param: click.Parameter, value: str | None) -> str | None:
    if value is not None and not is_valid_date_format(value):
        raise click.BadParameter(f"{value} is not a YYYY-MM-DD date.")
    return value


def _resolve_page(manager: PageManager, page: str) -> str:
    """Map a page type name or a page path to a page type value."""
    if page in PAGE_TYPE_CHOICE.choices:
        return page
    page_type = manager.detect_page_type(page)
    if page_type is None:
        raise click.BadParameter(
            f"{page} is neither a page type nor a page in the roll folder.",
            param_hint="PAGE",
        )
    return page_type.value


@click.group()
@click.version_option()
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Vault directory (defaults to the current directory)",
)
@click.option("--roll-folder", help="Folder holding the Now and Next pages")
@click.option("--archive-folder", help="Archive subfolder inside the roll folder")
@click.option("-v", "--verbose", is_flag=True, help="Print diagnostic messages")
@click.pass_context
def cli(
    ctx: click.Context,
    root: Path | None = None,
    roll_folder: str | None = None,
    archive_folder: str | None = None,
    verbose: bool = False,
):
    """
    Keep rolling Now / Next task pages in a folder of markdown notes.

    Examples:
        roll open now
        roll --root ~/notes rollover next
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    vault = (root or Path.cwd()).resolve()
    try:
        config = build_config(vault, roll_folder=roll_folder, archive_folder=archive_folder)
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    ctx.obj = PageManager(FileSystemStore(vault), config)


@cli.command(name="open")
@click.argument("page_type", type=PAGE_TYPE_CHOICE, default=PageType.NOW.value)
@click.option("--date", "today", callback=_validate_date, help="Start date for a new page")
@click.pass_obj
def open_page(manager: PageManager, page_type: str, today: str | None = None):
    """Open a page, creating it when it does not exist yet."""
    display_name = _display_name(page_type)
    try:
        page, created = manager.open(page_type, today or today_iso())
    except (RollError, StoreError) as error:
        raise click.ClickException(f"Error opening {display_name} page: {error}") from error

    if created:
        click.echo(f"Created new {display_name} page")
    else:
        click.echo(f"Opened {display_name} page from {page.started or 'unknown start date'}")
    click.echo(page.path)


@cli.command()
@click.argument("page", default=PageType.NOW.value)
@click.option("--date", "today", callback=_validate_date, help="Rollover date")
@click.pass_obj
def rollover(manager: PageManager, page: str, today: str | None = None):
    """Archive a page and carry its unfinished tasks into a fresh one.

    PAGE is a page type (now, next) or the page's path inside the vault.
    """
    page_type = _resolve_page(manager, page)
    display_name = _display_name(page_type)
    try:
        result = manager.rollover(page_type, today or today_iso())
    except PageNotFoundError as error:
        raise click.ClickException(
            f"No {display_name} page to rollover. Use 'roll open {page_type}' first."
        ) from error
    except (RollError, StoreError) as error:
        raise click.ClickException(f"Error rolling over {display_name} page: {error}") from error

    if result.rolled_tasks > 0:
        plural = "s" if result.rolled_tasks > 1 else ""
        click.echo(
            f"Rolled over {display_name} • {result.rolled_tasks} task{plural} rolled forward"
        )
    else:
        click.echo(f"Rolled over {display_name} • No tasks rolled forward")
    click.echo(f"Archived to {result.archive_path}")


@cli.command()
@click.argument("path")
@click.argument("line", type=click.IntRange(min=1))
@click.pass_obj
def toggle(manager: PageManager, path: str, line: int):
    """Cycle the checkbox on LINE (1-based) of PATH: [ ] -> [/] -> [x] -> [ ]."""
    try:
        toggled = manager.toggle(path, line - 1)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error
    except (RollError, StoreError) as error:
        raise click.ClickException(str(error)) from error
    click.echo(toggled)


@cli.command()
@click.argument("page_type", type=PAGE_TYPE_CHOICE, default=PageType.NOW.value)
@click.option(
    "--list", "as_list", is_flag=True, help="Print the unfinished tasks as a flat list"
)
@click.pass_obj
def status(manager: PageManager, page_type: str, as_list: bool = False):
    """Count todo, in-progress and done tasks on a page.

    With --list, print the unfinished tasks instead, flattened into one list.
    """
    display_name = _display_name(page_type)
    try:
        page = manager.get_page(page_type)
        if page is None:
            raise click.ClickException(f"No {display_name} page yet.")
        content = manager.store.read_text(page.path)
    except (RollError, StoreError) as error:
        raise click.ClickException(str(error)) from error

    if as_list:
        up_next = flatten_sections(filter_incomplete(parse_sections(content)))
        click.echo(up_next or f"No unfinished tasks on the {display_name} page.")
        return

    tasks = parse_tasks(content)
    counts = Counter(task.state for task in tasks)
    click.echo(f"{display_name} page from {page.started or 'unknown start date'}")
    click.echo(f"  todo:        {counts[TaskState.TODO.value]}")
    click.echo(f"  in progress: {counts[TaskState.IN_PROGRESS.value]}")
    click.echo(f"  done:        {counts[TaskState.DONE.value]}")
    known = {state.value for state in TaskState}
    other = sum(count for state, count in counts.items() if state not in known)
    if other:
        click.echo(f"  other:       {other}")


@cli.command()
@click.argument("page_type", type=PAGE_TYPE_CHOICE, default=PageType.NOW.value)
@click.option("--date", "today", callback=_validate_date, help="Start date to write")
def template(page_type: str, today: str | None = None):
    """Print the default template for a new page."""
    click.echo(build_page_template(page_type, today or today_iso()), nl=False)


if __name__ == "__main__":
    cli()
