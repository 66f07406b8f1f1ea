"""
Navigation Exceptions

Configuration errors raised when the page graph itself is broken. These are
never swallowed by the engine: a misconfigured branch must fail loudly.
"""

from typing import List


class NavigationConfigError(ValueError):
    """Base class for errors caused by a broken workflow definition."""
    pass


class PageNotFoundError(NavigationConfigError):
    """Raised when a branch selector names a page that is not in the flat list."""

    def __init__(self, page_id: str):
        self.page_id = page_id
        super().__init__(f'Next page "{page_id}" not found.')


class NavigationLoopError(NavigationConfigError):
    """Raised when resolution revisits a page within a single walk."""

    def __init__(self, page_id: str, path: List[str]):
        self.page_id = page_id
        self.path = list(path)
        super().__init__(
            f"Loop detected at page '{page_id}'. Navigation stopped. "
            f"Full path: {' -> '.join(self.path)}"
        )
