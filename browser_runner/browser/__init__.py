"""Browser module - WebDriver sessions."""

from .webdriver import BrowserSession, build_webdriver, check_grid

__all__ = [
    "BrowserSession",
    "build_webdriver",
    "check_grid",
]
