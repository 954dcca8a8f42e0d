"""WebDriver sessions for browser runs.

Builds Selenium drivers for local browsers or a remote Selenium Grid and
wraps them in the small surface the runner needs.
"""

import logging
from typing import Any, Optional

import requests
from selenium import webdriver

from ..config.schema import BrowserOptions

logger = logging.getLogger("browser_runner.browser")

GRID_STATUS_TIMEOUT = 10


class BrowserSession:
    """A live WebDriver connection owned by one run."""

    def __init__(self, driver: Any, name: str = ""):
        self.driver = driver
        self.name = name

    def navigate(self, url: str) -> None:
        self.driver.get(url)

    def execute_script(self, script: str, *args: Any) -> Any:
        return self.driver.execute_script(script, *args)

    def close(self) -> None:
        """End the WebDriver session and the browser process."""
        self.driver.quit()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def __repr__(self) -> str:
        return f"BrowserSession({self.name!r})"


def _browser_options(name: str) -> Any:
    """Selenium options object for a browser name."""
    key = name.lower()

    if key in ("firefox", "headlessfirefox"):
        opts = webdriver.FirefoxOptions()
        if key == "headlessfirefox":
            opts.add_argument("-headless")
        return opts

    if key in ("chrome", "headlesschrome"):
        opts = webdriver.ChromeOptions()
        if key == "headlesschrome":
            opts.add_argument("--headless=new")
        return opts

    if key == "microsoftedge":
        return webdriver.EdgeOptions()

    if key == "safari":
        return webdriver.SafariOptions()

    if key == "internet explorer":
        return webdriver.IeOptions()

    raise ValueError(f"Unsupported browser: {name}")


_LOCAL_DRIVERS = {
    "firefox": webdriver.Firefox,
    "headlessfirefox": webdriver.Firefox,
    "chrome": webdriver.Chrome,
    "headlesschrome": webdriver.Chrome,
    "microsoftedge": webdriver.Edge,
    "safari": webdriver.Safari,
    "internet explorer": webdriver.Ie,
}


def check_grid(grid_url: str, timeout: float = GRID_STATUS_TIMEOUT) -> dict:
    """Ask a Selenium Grid whether it can accept sessions.

    GET <grid>/status

    Returns:
        The status payload's ``value`` object.

    Raises:
        ConnectionError: If the grid is unreachable or not ready.
    """
    status_url = f"{grid_url.rstrip('/')}/status"
    try:
        response = requests.get(status_url, timeout=timeout)
        response.raise_for_status()
        value = response.json().get("value", {})
    except (requests.RequestException, ValueError) as e:
        raise ConnectionError(f"Selenium grid at {grid_url} is not reachable: {e}") from e

    if not value.get("ready", False):
        message = value.get("message") or "not ready"
        raise ConnectionError(f"Selenium grid at {grid_url} is not ready: {message}")
    return value


def build_webdriver(browser: Optional[BrowserOptions] = None) -> BrowserSession:
    """Launch a browser and connect to it.

    Args:
        browser: Browser name, remote grid settings and extra capabilities.

    Returns:
        A BrowserSession the caller must close.

    Raises:
        ValueError: For an unsupported browser name.
        ConnectionError: If a remote grid is unreachable.
        selenium.common.exceptions.WebDriverException: If the browser
            cannot be started.
    """
    browser = browser or BrowserOptions()
    opts = _browser_options(browser.name)
    for key, value in browser.capabilities.items():
        opts.set_capability(key, value)

    if browser.use_remote_grid:
        check_grid(browser.grid_url)
        logger.debug("Starting %s on grid %s", browser.name, browser.grid_url)
        driver = webdriver.Remote(command_executor=browser.grid_url, options=opts)
    else:
        logger.debug("Starting local %s", browser.name)
        driver = _LOCAL_DRIVERS[browser.name.lower()](options=opts)

    return BrowserSession(driver, name=browser.name)
