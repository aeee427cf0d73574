"""Errors raised by the page modelling core."""

from __future__ import annotations


class PageLensError(Exception):
    """Base class for all pagelens errors."""

    pass


class ScanFailure(PageLensError):
    """Raised when a page scan cannot complete.

    Covers script evaluation failures, unreachable pages and pages that are
    not in a stable ready state. Never retried internally.
    """

    def __init__(self, message: str, url: str | None = None) -> None:
        self.url = url
        if url:
            message = f"{message} (url: {url})"
        super().__init__(message)


class ElementNotFound(PageLensError):
    """Raised when every resolver strategy is exhausted for a target."""

    def __init__(self, target: str, attempted: list[str] | None = None) -> None:
        self.target = target
        self.attempted = list(attempted or [])
        tried = ", ".join(self.attempted) if self.attempted else "nothing"
        super().__init__(f"Could not find {target}; tried: {tried}")


class LoginTimeout(PageLensError):
    """Raised when the expected post-login state never appears."""

    def __init__(self, expected: str, observed: str, timeout: float) -> None:
        self.expected = expected
        self.observed = observed
        self.timeout = timeout
        super().__init__(
            f"Login timeout after {timeout:g}s: expected '{expected}' "
            f"but current URL is '{observed}'"
        )


class NavigationTimeout(PageLensError):
    """Raised when a page does not finish loading within its budget."""

    def __init__(self, url: str, timeout: float) -> None:
        self.url = url
        self.timeout = timeout
        super().__init__(f"Navigation to {url} did not complete within {timeout:g}s")
