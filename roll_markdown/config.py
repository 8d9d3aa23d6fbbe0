"""Configuration loading and management."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path, PurePosixPath
import tomllib


@dataclass
class RollConfig:
    """Configuration for where rolling pages live.

    Attributes:
        roll_folder: Folder holding the Now and Next pages, relative to the
            vault root. An empty string means the vault root itself.
        archive_folder: Subfolder of `roll_folder` that receives archived pages.

    Examples:
        RollConfig(roll_folder="Journal", archive_folder="Old")
    """

    roll_folder: str = "Roll"
    archive_folder: str = "Archive"


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`archive_folder` must not be empty")
    """


def load_config(search_path: Path) -> RollConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.roll-markdown]`` table from `pyproject.toml` and the
    ``[roll-markdown]`` or ``[tool.roll-markdown]`` table from
    `.roll-markdown.toml` when present. Returns default values when no
    configuration is found. TOML files that cannot be read or decoded are
    skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        RollConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If the table is present but is not a mapping or contains
            unsupported keys.

    Examples:
        load_config(Path("vault"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "roll-markdown")]
        )
        if pyproject_config is not None:
            return pyproject_config

        dotfile_config = _load_from_file(
            current / ".roll-markdown.toml",
            table_paths=[("roll-markdown",), ("tool", "roll-markdown")],
        )
        if dotfile_config is not None:
            return dotfile_config

        parent = current.parent
        if parent == current:
            break
        current = parent

    return RollConfig()


_MISSING = object()


def _load_from_file(config_file: Path, table_paths: list[tuple[str, ...]]) -> RollConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> RollConfig:
    table_display = ".".join(table_path)

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    if not raw_config:
        return RollConfig()

    try:
        return RollConfig(**raw_config)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def normalize_config(config: RollConfig) -> RollConfig:
    """Strip whitespace and trailing slashes from folder settings."""
    if not isinstance(config.roll_folder, str) or not isinstance(config.archive_folder, str):
        return config
    return replace(
        config,
        roll_folder=config.roll_folder.strip().rstrip("/"),
        archive_folder=config.archive_folder.strip().rstrip("/"),
    )


def validate_config(config: RollConfig) -> None:
    """Validate a `RollConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If a folder is not a string, is absolute, climbs out of the
            vault with ``..``, or if the archive folder is empty.

    Examples:
        validate_config(RollConfig(roll_folder="Roll"))
    """
    config = normalize_config(config)

    for key in ("roll_folder", "archive_folder"):
        value = getattr(config, key)
        if not isinstance(value, str):
            raise ConfigError(f"`{key}` must be a string")
        if value.startswith("~") or PurePosixPath(value).is_absolute():
            raise ConfigError(f"`{key}` must be relative to the vault root")
        if ".." in PurePosixPath(value).parts:
            raise ConfigError(f"`{key}` must not contain `..` segments")

    if not config.archive_folder:
        raise ConfigError("`archive_folder` must not be empty")


def apply_overrides(config: RollConfig, **overrides: object) -> RollConfig:
    """Apply override values to a `RollConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        RollConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `RollConfig`.

    Examples:
        updated = apply_overrides(config, roll_folder="Journal")
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> RollConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        RollConfig: Validated configuration.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), archive_folder="Done")
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    validate_config(config)
    return normalize_config(config)
