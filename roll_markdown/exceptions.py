"""Package-specific exception types."""

from __future__ import annotations


class RollError(Exception):
    """Base class for roll-markdown errors raised outside the pure core."""


class FrontmatterError(RollError):
    """Raised when a page's YAML frontmatter cannot be decoded.

    Args:
        path: Page whose frontmatter is invalid, when known.
        reason: Description of the decoding failure.
    """

    def __init__(self, reason: str, path: str | None = None):
        self.path = path
        self.reason = reason
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        if self.path is None:
            return f"Invalid frontmatter: {self.reason}"
        return f"Invalid frontmatter in {self.path}: {self.reason}"


class StoreError(OSError):
    """Raised when the document store cannot complete an operation."""


class PageNotFoundError(StoreError):
    """Raised when a page is missing from the document store.

    Args:
        path: Vault-relative path that was looked up.
    """

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"{path} does not exist.")


class PageExistsError(StoreError):
    """Raised when creating a page at a path that is already taken.

    Args:
        path: Vault-relative path that already exists.
    """

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"{path} already exists; refusing to overwrite.")
