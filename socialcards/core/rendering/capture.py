"""
Capture Session
===============

Playwright-based PNG capture of rendered card markup.
One browser is launched per capture and always closed on the way out.
"""

from typing import Optional, Dict, Any, List
import asyncio

from playwright.async_api import async_playwright, Browser, Page

from socialcards.config.logging import get_logger
from socialcards.config.settings import Settings, get_settings
from socialcards.core.rendering.transport import MarkupTransport
from socialcards.models.schemas import CaptureResult

logger = get_logger(__name__)


HARDENING_ARGS: List[str] = [
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--disable-software-rasterizer",
    "--force-color-profile=srgb",
]

# Resolves once every image has settled, fonts are ready and a frame was painted
READY_SCRIPT = """
async (settleDelay) => {
  const images = Array.from(document.images);
  await Promise.all(images.map((img) => {
    if (img.complete) {
      return Promise.resolve();
    }
    return new Promise((resolve) => {
      img.addEventListener('load', resolve, { once: true });
      img.addEventListener('error', resolve, { once: true });
    });
  }));
  if (document.fonts && document.fonts.ready) {
    await document.fonts.ready;
  }
  await new Promise((resolve) => requestAnimationFrame(() => resolve()));
  await new Promise((resolve) => setTimeout(resolve, settleDelay));
  return document.readyState;
}
"""

REFLOW_SCRIPT = """
() => {
  const body = document.body;
  if (!body) {
    return 0;
  }
  const previous = body.style.display;
  body.style.display = 'none';
  void body.offsetHeight;
  body.style.display = previous;
  return body.offsetHeight;
}
"""

DIAGNOSTICS_SCRIPT = """
() => {
  const body = document.body;
  const title = document.querySelector('.title');
  return {
    readyState: document.readyState,
    backgroundColor: body ? window.getComputedStyle(body).backgroundColor : null,
    hasTitle: !!title,
    titleText: title ? title.textContent : null,
    bodyHtmlLength: body ? body.innerHTML.length : 0,
  };
}
"""


class CaptureError(Exception):
    """Exception raised when a capture fails."""

    pass


def launch_args(settings: Settings) -> List[str]:
    """Chromium arguments for the configured deployment."""
    args: List[str] = []
    if settings.browser_no_sandbox:
        args += ["--no-sandbox", "--disable-setuid-sandbox"]
    if settings.browser_hardened:
        args += HARDENING_ARGS
    args += list(settings.browser_extra_args)
    return args


class CaptureSession:
    """Drive a headless browser through navigation, readiness and screenshot."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[MarkupTransport] = None,
        debug: Optional[bool] = None,
    ):
        self.settings = settings or get_settings()
        self.debug = self.settings.render_debug if debug is None else debug
        self.transport = transport or MarkupTransport(
            threshold=self.settings.markup_file_threshold, temp_dir=self.settings.temp_path
        )
        self.timeout = self.settings.capture_timeout
        self.blank_threshold = self.settings.blank_frame_threshold
        self.logger: Any = logger.bind(component="capture_session")  # structlog.BoundLoggerBase

    async def capture(self, markup: str, width: int, height: int) -> CaptureResult:
        """
        Capture rendered markup as a PNG.

        Args:
            markup: Complete HTML document
            width: Viewport width in pixels
            height: Viewport height in pixels

        Returns:
            CaptureResult containing PNG data and metadata

        Raises:
            CaptureError: If any step fails or the capture times out
        """
        self._log_debug(
            "Starting capture",
            html_length=len(markup),
            html_bytes=len(markup.encode("utf-8")),
            encoding="utf-8",
            width=width,
            height=height,
        )

        try:
            result = await asyncio.wait_for(self._run(markup, width, height), timeout=self.timeout)
        except CaptureError as e:
            self.logger.error("Capture error", error=str(e))
            raise
        except asyncio.TimeoutError as e:
            self.logger.error("Capture timed out", timeout=self.timeout)
            raise CaptureError(f"Capture timed out after {self.timeout}s") from e
        except Exception as e:
            error_msg = f"Capture failed: {e}"
            self.logger.error("Capture error", error=error_msg)
            raise CaptureError(error_msg) from e

        self.logger.info(
            "Capture completed",
            file_size=result.file_size,
            transport=result.transport,
            retried=result.retried,
        )
        return result

    async def _run(self, markup: str, width: int, height: int) -> CaptureResult:
        playwright = await async_playwright().start()
        browser: Optional[Browser] = None
        try:
            try:
                browser = await playwright.chromium.launch(
                    headless=self.settings.browser_headless,
                    args=launch_args(self.settings),
                    timeout=self.timeout * 1000,
                )
            except Exception as e:
                raise CaptureError(f"Browser launch failed: {e}") from e

            context = await browser.new_context(
                viewport={"width": width, "height": height}, device_scale_factor=1
            )
            page = await context.new_page()
            page.set_default_timeout(self.timeout * 1000)

            with self.transport.prepare(markup) as target:
                self._log_debug("Navigating", transport=target.mode)
                await page.goto(target.url, wait_until="load")

            await page.set_viewport_size({"width": width, "height": height})
            await page.wait_for_load_state("networkidle")
            ready_state = await page.evaluate(READY_SCRIPT, self.settings.settle_delay_ms)
            self._log_debug("Page ready", ready_state=ready_state)

            if self.debug:
                await self._log_diagnostics(page)

            screenshot = await self._screenshot(page)
            self._log_debug("Screenshot generated", size=len(screenshot))

            retried = False
            if len(screenshot) < self.blank_threshold:
                screenshot = await self._retry_blank_frame(page, len(screenshot))
                retried = True

            return CaptureResult(
                png_data=screenshot,
                file_size=len(screenshot),
                width=width,
                height=height,
                transport=target.mode,
                retried=retried,
            )
        finally:
            if browser is not None:
                await browser.close()
            await playwright.stop()

    async def _screenshot(self, page: Page) -> bytes:
        return await page.screenshot(type="png", full_page=False)

    async def _retry_blank_frame(self, page: Page, size: int) -> bytes:
        """Force a reflow, wait, and take exactly one more screenshot."""
        self.logger.warning(
            "Screenshot seems blank, retrying once",
            size=size,
            threshold=self.blank_threshold,
        )
        await page.evaluate(REFLOW_SCRIPT)
        await asyncio.sleep(self.settings.blank_retry_delay)

        screenshot = await self._screenshot(page)
        self._log_debug("Retry screenshot generated", size=len(screenshot))
        return screenshot

    async def _log_diagnostics(self, page: Page) -> None:
        diagnostics: Dict[str, Any] = await page.evaluate(DIAGNOSTICS_SCRIPT)
        self._log_debug(
            "Page diagnostics",
            ready_state=diagnostics.get("readyState"),
            background_color=diagnostics.get("backgroundColor"),
            has_title=diagnostics.get("hasTitle"),
            title_text=diagnostics.get("titleText"),
            body_html_length=diagnostics.get("bodyHtmlLength"),
        )

    def _log_debug(self, message: str, **kwargs: Any) -> None:
        if not self.debug:
            return
        self.logger.info(message, **kwargs)


async def capture_markup(
    markup: str, width: int, height: int, settings: Optional[Settings] = None
) -> CaptureResult:
    """
    Capture markup with a fresh session.

    Args:
        markup: Complete HTML document
        width: Viewport width
        height: Viewport height
        settings: Optional settings override

    Returns:
        CaptureResult containing PNG data and metadata
    """
    session = CaptureSession(settings)
    return await session.capture(markup, width, height)
