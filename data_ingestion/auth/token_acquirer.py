from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Callable, List, Mapping, Optional, Sequence

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from config import (
    BROWSER_LAUNCH_ARGS,
    BROWSER_NAVIGATION_TIMEOUT_SECONDS,
    BROWSER_RESPONSE_TIMEOUT_SECONDS,
    BROWSER_USER_AGENT,
    LUNARCRUSH_API_URL_MARKER,
    LUNARCRUSH_CATEGORY_PAGE_URL,
    TOKEN_EXPIRY_HOURS,
)
from core.exceptions import AcquisitionError
from data_ingestion.auth.credential_cache import Credential
from utils.time_utils import utc_now

LOGGER = logging.getLogger("lunar_snapshot.token_acquirer")

_BEARER_PREFIX = "bearer "

_HIDE_WEBDRIVER_SCRIPT = (
    "Object.defineProperty(navigator, 'webdriver', {get: () => undefined});"
)


async def _close_quietly(browser: Any) -> None:
    try:
        await browser.close()
    except PlaywrightError:
        LOGGER.warning("Browser teardown failed", exc_info=True)


def extract_bearer(headers: Mapping[str, str]) -> Optional[str]:
    """Return the token from an ``authorization: Bearer <token>`` header."""
    for name, value in headers.items():
        if name.lower() != "authorization" or not value:
            continue
        if value.lower().startswith(_BEARER_PREFIX):
            token = value[len(_BEARER_PREFIX):].strip()
            if token:
                return token
    return None


class BrowserTokenAcquirer:
    """Intercepts a LunarCrush bearer token from a headless Chromium session.

    The page's own API traffic carries the token. Outbound request headers
    are watched during navigation; if nothing shows up, the acquirer waits
    for an API response and inspects the request that produced it. There is
    no static fallback credential.
    """

    def __init__(
        self,
        *,
        page_url: str = LUNARCRUSH_CATEGORY_PAGE_URL,
        api_url_marker: str = LUNARCRUSH_API_URL_MARKER,
        user_agent: str = BROWSER_USER_AGENT,
        launch_args: Sequence[str] = tuple(BROWSER_LAUNCH_ARGS),
        headless: bool = True,
        navigation_timeout_seconds: float = BROWSER_NAVIGATION_TIMEOUT_SECONDS,
        response_timeout_seconds: float = BROWSER_RESPONSE_TIMEOUT_SECONDS,
        token_expiry_hours: float = TOKEN_EXPIRY_HOURS,
        clock: Callable[[], datetime] = utc_now,
        playwright_factory: Callable[[], Any] = async_playwright,
    ) -> None:
        self.page_url = page_url
        self.api_url_marker = api_url_marker
        self.user_agent = user_agent
        self.launch_args = list(launch_args)
        self.headless = headless
        self.navigation_timeout_seconds = navigation_timeout_seconds
        self.response_timeout_seconds = response_timeout_seconds
        self.token_expiry_hours = token_expiry_hours
        self._clock = clock
        self._playwright_factory = playwright_factory

    @classmethod
    def from_settings(cls, settings: Any, **overrides: Any) -> "BrowserTokenAcquirer":
        kwargs = dict(
            headless=settings.browser_headless,
            navigation_timeout_seconds=settings.browser_navigation_timeout_seconds,
            response_timeout_seconds=settings.browser_response_timeout_seconds,
            token_expiry_hours=settings.token_expiry_hours,
        )
        kwargs.update(overrides)
        return cls(**kwargs)

    async def acquire(self) -> Credential:
        """Run one browser session and return a fresh credential.

        Raises:
            AcquisitionError: navigation failed, the browser crashed, or no
                bearer token was observed.
        """
        LOGGER.info("Launching headless browser to capture bearer token")
        token = await self._capture_bearer()
        if not token:
            raise AcquisitionError(
                f"No bearer token observed for requests matching "
                f"'{self.api_url_marker}'",
                stage="extract",
            )
        expires_at = self._clock() + timedelta(hours=self.token_expiry_hours)
        LOGGER.info("Captured bearer token, valid until %s", expires_at.isoformat())
        return Credential(value=token, expires_at=expires_at)

    async def _capture_bearer(self) -> Optional[str]:
        captured: List[str] = []

        def _on_request(request: Any) -> None:
            if captured:
                return
            token = extract_bearer(request.headers)
            if token:
                captured.append(token)

        try:
            async with self._playwright_factory() as playwright:
                browser = await playwright.chromium.launch(
                    headless=self.headless, args=self.launch_args
                )
                try:
                    context = await browser.new_context(user_agent=self.user_agent)
                    await context.add_init_script(_HIDE_WEBDRIVER_SCRIPT)
                    page = await context.new_page()
                    page.on("request", _on_request)

                    try:
                        await page.goto(
                            self.page_url,
                            wait_until="networkidle",
                            timeout=self.navigation_timeout_seconds * 1000,
                        )
                    except PlaywrightTimeoutError as exc:
                        raise AcquisitionError(
                            f"Navigation to {self.page_url} timed out",
                            stage="navigate",
                        ) from exc

                    if captured:
                        return captured[0]

                    LOGGER.debug(
                        "No bearer header during navigation; waiting for '%s' response",
                        self.api_url_marker,
                    )
                    try:
                        response = await page.wait_for_event(
                            "response",
                            predicate=lambda resp: self.api_url_marker in resp.url,
                            timeout=self.response_timeout_seconds * 1000,
                        )
                    except PlaywrightTimeoutError as exc:
                        raise AcquisitionError(
                            f"No response matching '{self.api_url_marker}' within "
                            f"{self.response_timeout_seconds}s",
                            stage="await_response",
                        ) from exc

                    headers = await response.request.all_headers()
                    return captured[0] if captured else extract_bearer(headers)
                finally:
                    await _close_quietly(browser)
        except PlaywrightError as exc:
            raise AcquisitionError(
                f"Browser session failed: {exc}", stage="browser"
            ) from exc
