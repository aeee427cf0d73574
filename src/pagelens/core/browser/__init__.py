"""Browser driver implementations."""

from pagelens.core.browser.playwright_driver import (
    PlaywrightDriver,
    PlaywrightElement,
    launch_driver,
)

__all__ = [
    "PlaywrightDriver",
    "PlaywrightElement",
    "launch_driver",
]
