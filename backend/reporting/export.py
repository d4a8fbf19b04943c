"""
Export one rendered proposal to a saved PDF through an injected rasterizer.

The rasterizer is a capability passed in by the host (HTTP app, CLI), checked
for presence on every call. Failures never escape as exceptions: they come
back as an ExportResult carrying the message to show the user.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from models import ProposalData

from .locale_text import DEFAULT_SCRIPT
from .rasterizer import DEFAULT_EXPORT_OPTIONS, ExportOptions, Rasterizer
from .report_builder import build_proposal_html
from .report_data import proposal_filename

logger = logging.getLogger(__name__)

MSG_UNAVAILABLE = "PDF generator library not loaded correctly. Please refresh."
MSG_FAILED = "Failed to generate PDF. Please try again."
MSG_BUSY = "A PDF export is already in progress."

SaveFn = Callable[[str, bytes], None]


class ExportStatus(str, Enum):
    SAVED = "saved"
    UNAVAILABLE = "unavailable"
    FAILED = "failed"
    BUSY = "busy"


@dataclass(frozen=True)
class ExportResult:
    status: ExportStatus
    filename: str
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status is ExportStatus.SAVED


class ExportTrigger:
    """
    Hand a rendered proposal to the rasterizer and save the resulting PDF.

    is_exporting is an advisory re-entry flag for the host UI; it is not a lock.
    There is no cancellation or automatic retry: a started export runs to
    completion or failure.
    """

    def __init__(self, rasterizer: Optional[Rasterizer], options: ExportOptions = DEFAULT_EXPORT_OPTIONS):
        self.rasterizer = rasterizer
        self.options = options
        self.is_exporting = False

    def available(self) -> bool:
        return self.rasterizer is not None and self.rasterizer.is_available()

    async def export(self, proposal: ProposalData, save: SaveFn, script: str = DEFAULT_SCRIPT) -> ExportResult:
        filename = proposal_filename(proposal)
        if self.is_exporting:
            return ExportResult(ExportStatus.BUSY, filename, MSG_BUSY)
        if not self.available():
            logger.warning("PDF export requested but no rasterizer is available")
            return ExportResult(ExportStatus.UNAVAILABLE, filename, MSG_UNAVAILABLE)

        # Renderer errors (unknown script) belong to the caller, so render before taking the flag.
        html_content = build_proposal_html(proposal, script)
        self.is_exporting = True
        try:
            pdf_bytes = await self.rasterizer.render(html_content, self.options)
            save(filename, pdf_bytes)
        except Exception:
            logger.exception("PDF generation failed for %s", filename)
            return ExportResult(ExportStatus.FAILED, filename, MSG_FAILED)
        finally:
            self.is_exporting = False

        logger.info("PDF export saved %s (%d bytes)", filename, len(pdf_bytes))
        return ExportResult(ExportStatus.SAVED, filename)
