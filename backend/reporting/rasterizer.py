"""
Rasterize a rendered proposal into a paginated PDF.

Chromium (via Playwright) screenshots the document container at a raised
device scale factor, then the image is cut into page-height strips and each
strip is placed on its own PDF page. This reproduces the on-screen layout
exactly, at the cost of the PDF holding images rather than selectable text.
"""
from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from io import BytesIO
from typing import Literal, Protocol

from PIL import Image
from reportlab.lib.pagesizes import A4, landscape, portrait
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

logger = logging.getLogger(__name__)

# Trailing strips shorter than this share of a page are rounding residue, not content.
_MIN_STRIP_FRACTION = 0.01


@dataclass(frozen=True)
class ExportOptions:
    """Options handed to the rasterizer for one export."""
    paper: Literal["a4"] = "a4"
    orientation: Literal["portrait", "landscape"] = "portrait"
    # The template pads each page itself, so the PDF page has no margin.
    margin_mm: float = 0.0
    scale: float = 2.0
    image_quality: float = 0.98
    selector: str = ".print-container"

    def page_size(self) -> tuple[float, float]:
        if self.orientation == "landscape":
            return landscape(A4)
        return portrait(A4)

    @property
    def jpeg_quality(self) -> int:
        return max(1, min(100, round(self.image_quality * 100)))


DEFAULT_EXPORT_OPTIONS = ExportOptions()


class Rasterizer(Protocol):
    def is_available(self) -> bool:
        ...

    async def render(self, html_content: str, options: ExportOptions) -> bytes:
        ...


def paginate_image_to_pdf(image_bytes: bytes, options: ExportOptions = DEFAULT_EXPORT_OPTIONS) -> bytes:
    """Slice a full-document screenshot into page strips and lay them out as a PDF."""
    image = Image.open(BytesIO(image_bytes)).convert("RGB")
    page_w, page_h = options.page_size()
    margin = options.margin_mm * mm
    content_w = page_w - 2 * margin
    content_h = page_h - 2 * margin
    strip_px = max(1, round(image.width * content_h / content_w))

    buf = BytesIO()
    pdf = canvas.Canvas(buf, pagesize=(page_w, page_h))
    pages = 0
    top = 0
    while top < image.height:
        bottom = min(top + strip_px, image.height)
        if pages and (bottom - top) < strip_px * _MIN_STRIP_FRACTION:
            break
        strip = image.crop((0, top, image.width, bottom))
        jpeg = BytesIO()
        strip.save(jpeg, format="JPEG", quality=options.jpeg_quality)
        jpeg.seek(0)
        strip_h = content_w * strip.height / image.width
        pdf.drawImage(ImageReader(jpeg), margin, page_h - margin - strip_h, width=content_w, height=strip_h)
        pdf.showPage()
        pages += 1
        top = bottom
    pdf.save()
    logger.debug("paginated %dx%d screenshot into %d page(s)", image.width, image.height, pages)
    return buf.getvalue()


class PlaywrightRasterizer:
    """Headless Chromium screenshot-and-paginate renderer."""

    def __init__(self, launch_args: list[str] | None = None, timeout_ms: int | None = None):
        if launch_args is None:
            raw = os.getenv("PLAYWRIGHT_CHROMIUM_ARGS", "--no-sandbox")
            launch_args = [a for a in raw.split() if a]
        self.launch_args = launch_args
        self.timeout_ms = timeout_ms if timeout_ms is not None else int(os.getenv("EXPORT_TIMEOUT_MS", "30000"))

    def is_available(self) -> bool:
        try:
            import playwright.async_api  # noqa: F401
        except ImportError:
            return False
        return True

    async def render(self, html_content: str, options: ExportOptions) -> bytes:
        from playwright.async_api import async_playwright

        async with async_playwright() as p:
            browser = await p.chromium.launch(args=self.launch_args)
            try:
                page = await browser.new_page(device_scale_factor=options.scale)
                await page.set_content(html_content, wait_until="networkidle", timeout=self.timeout_ms)
                await page.emulate_media(media="screen")
                image_bytes = await page.locator(options.selector).screenshot(
                    type="jpeg",
                    quality=options.jpeg_quality,
                    timeout=self.timeout_ms,
                )
            finally:
                await browser.close()
        # Slicing a 2x full-document image is CPU-bound; keep it off the event loop.
        return await asyncio.to_thread(paginate_image_to_pdf, image_bytes, options)

    async def check(self) -> None:
        """Launch Chromium with the export launch args and load a trivial page. Raises on failure."""
        from playwright.async_api import async_playwright

        async with async_playwright() as p:
            browser = await p.chromium.launch(args=self.launch_args)
            try:
                page = await browser.new_page()
                await page.set_content("<html><body>ok</body></html>", timeout=self.timeout_ms)
            finally:
                await browser.close()


def load_rasterizer() -> PlaywrightRasterizer | None:
    """Return the Playwright rasterizer, or None when Playwright is not installed."""
    rasterizer = PlaywrightRasterizer()
    if not rasterizer.is_available():
        logger.warning("Playwright is not installed; PDF export is unavailable.")
        return None
    return rasterizer
