"""
Browser session management: launch, page rendering and teardown.
"""
import glob
import importlib.util
import logging
import os
import subprocess
import sys
from dataclasses import dataclass
from typing import Any, Optional

from playwright.async_api import async_playwright, Error as PlaywrightError, TimeoutError as PlaywrightTimeout

from .config import Settings, settings as default_settings
from .errors import BrowserLaunchError, TargetFailure
from .strategies import AUTO_SCROLL_JS, LIST_SELECTORS

module_logger = logging.getLogger(__name__)


@dataclass
class RenderResult:
    """A rendered search page. ``empty`` means no listing container showed up."""

    url: str
    page: Any = None
    empty: bool = False


def _has_chromium_executable(cache_dir: str) -> bool:
    if not cache_dir:
        return False
    patterns = (
        "chromium-*/chrome-linux*/chrome",
        "chromium_headless_shell-*/chrome-linux*/headless_shell",
        "chromium-*/chrome-mac*/Chromium.app",
        "chromium-*/chrome-win*/chrome.exe",
    )
    return any(glob.glob(os.path.join(cache_dir, pattern)) for pattern in patterns)


def ensure_chromium(cfg: Settings = None, logger: Optional[logging.Logger] = None) -> bool:
    """
    Make sure a Chromium build is available to Playwright.

    Runs ``playwright install chromium`` when nothing is cached and
    auto-install is enabled. Returns False if the browser is still missing.
    """
    cfg = cfg or default_settings
    logger = logger or module_logger
    if importlib.util.find_spec("playwright") is None:
        logger.warning("playwright is not installed")
        return False
    if _has_chromium_executable(cfg.BROWSER_CACHE):
        return True
    if not cfg.BROWSER_AUTO_INSTALL:
        logger.warning(f"Chromium not found in {cfg.BROWSER_CACHE} and auto-install is disabled")
        return False

    logger.info("Installing Chromium for Playwright...")
    env = os.environ.copy()
    env.setdefault("PLAYWRIGHT_BROWSERS_PATH", cfg.BROWSER_CACHE)
    cmd = [sys.executable, "-m", "playwright", "install", "chromium"]
    try:
        result = subprocess.run(cmd, env=env, check=False, capture_output=True, text=True, timeout=300)
    except (OSError, subprocess.SubprocessError) as exc:
        logger.warning(f"Chromium install failed: {exc}")
        return False
    if result.returncode != 0:
        logger.warning(f"Chromium install failed (code={result.returncode}): {(result.stderr or '').strip()}")
        return False
    logger.info("Chromium install complete")
    return True


class BrowserSession:
    """
    One Chromium process with one isolated context, reused across targets.

    Use as an async context manager; the browser is closed on every exit
    path.
    """

    def __init__(self, cfg: Settings = None, headless: Optional[bool] = None, logger: Optional[logging.Logger] = None):
        self.cfg = cfg or default_settings
        self.headless = self.cfg.HEADLESS if headless is None else headless
        self.logger = logger or module_logger
        self._playwright = None
        self._browser = None
        self._context = None
        self._page = None

    async def __aenter__(self) -> "BrowserSession":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @property
    def started(self) -> bool:
        return self._context is not None

    async def start(self) -> None:
        """Launch the browser and open the browsing context."""
        if self.started:
            return
        launch_args = ["--disable-blink-features=AutomationControlled"]
        if self.headless:
            launch_args += ["--disable-dev-shm-usage", "--no-sandbox", "--disable-setuid-sandbox", "--disable-gpu"]

        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(headless=self.headless, args=launch_args)
            self._context = await self._browser.new_context(
                viewport={"width": self.cfg.VIEWPORT_WIDTH, "height": self.cfg.VIEWPORT_HEIGHT},
                user_agent=self.cfg.USER_AGENT,
                locale=self.cfg.LOCALE,
            )
        except PlaywrightError as exc:
            await self.close()
            raise BrowserLaunchError(f"Failed to launch browser: {exc}") from exc

        self._context.set_default_timeout(self.cfg.SELECTOR_TIMEOUT_MS)
        self._context.set_default_navigation_timeout(self.cfg.NAV_TIMEOUT_MS)
        self.logger.info(f">>> Browser started (headless={self.headless})")

    async def page(self):
        """Current page, reopened if it crashed or was closed."""
        if not self.started:
            await self.start()
        if self._page is None or self._page.is_closed():
            self._page = await self._context.new_page()
        return self._page

    async def goto(self, url: str, timeout_ms: Optional[int] = None):
        """Navigate and wait for network idle; raise TargetFailure on error."""
        page = await self.page()
        try:
            await page.goto(url, wait_until="networkidle", timeout=timeout_ms or self.cfg.NAV_TIMEOUT_MS)
        except PlaywrightTimeout as exc:
            raise TargetFailure(f"navigation timed out: {url}") from exc
        except PlaywrightError as exc:
            raise TargetFailure(f"navigation failed: {exc}") from exc
        return page

    async def render(self, url: str) -> RenderResult:
        """
        Render a search-results page and force lazy content to load.

        Returns an empty result when the listing container never appears.
        Navigation errors raise TargetFailure.
        """
        page = await self.goto(url)

        container = ", ".join(LIST_SELECTORS["container"])
        try:
            await page.wait_for_selector(container, timeout=self.cfg.SELECTOR_TIMEOUT_MS)
        except PlaywrightTimeout:
            self.logger.warning(f"No listing container on {url}")
            return RenderResult(url=url, page=page, empty=True)
        except PlaywrightError as exc:
            raise TargetFailure(f"page failed while waiting for listings: {exc}") from exc

        await self.auto_scroll(page)
        await page.wait_for_timeout(self.cfg.SETTLE_MS)
        return RenderResult(url=url, page=page, empty=False)

    async def auto_scroll(self, page) -> None:
        """Scroll down in fixed steps so lazy-loaded cards materialize."""
        try:
            await page.evaluate(AUTO_SCROLL_JS, {
                "step": self.cfg.SCROLL_STEP_PX,
                "maxDistance": self.cfg.SCROLL_MAX_PX,
                "maxIterations": self.cfg.SCROLL_MAX_ITERATIONS,
                "interval": self.cfg.SCROLL_INTERVAL_MS,
            })
        except PlaywrightError as exc:
            # Extraction still works on whatever is already in the DOM
            self.logger.warning(f"Auto-scroll interrupted: {exc}")

    async def close(self) -> None:
        """Close page, context, browser and the Playwright driver."""
        try:
            for closer in (self._page, self._context, self._browser):
                if closer is None:
                    continue
                try:
                    await closer.close()
                except PlaywrightError as exc:
                    self.logger.debug(f"Ignoring error during browser teardown: {exc}")
        finally:
            if self._playwright is not None:
                try:
                    await self._playwright.stop()
                except PlaywrightError as exc:
                    self.logger.debug(f"Ignoring error stopping Playwright: {exc}")
            self._page = self._context = self._browser = self._playwright = None
