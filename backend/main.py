from __future__ import annotations

import logging
import os
import re
import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from urllib.parse import quote

from dotenv import load_dotenv

# Load .env from backend directory so PROPOSAL_DEFAULT_SCRIPT etc. are available
load_dotenv(Path(__file__).resolve().parent / ".env")

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware

from models import ProposalData
from proposals import get_proposal, list_proposals
from reporting.export import ExportStatus, ExportTrigger
from reporting.latex_builder import build_proposal_latex
from reporting.locale_text import DEFAULT_SCRIPT, SCRIPTS, check_script
from reporting.rasterizer import PlaywrightRasterizer, load_rasterizer
from reporting.report_builder import build_proposal_html
from reporting.report_data import proposal_filename

# Version for /health and startup log (Render sets RENDER_GIT_COMMIT)
VERSION = (os.environ.get("RENDER_GIT_COMMIT") or "").strip() or "unknown"

HOST = os.environ.get("HOST", "127.0.0.1")
PORT = int(os.environ.get("PORT", "8010"))

_LOG = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI):
    trigger: ExportTrigger = app.state.export_trigger
    _LOG.info(
        "Proposal renderer starting on http://%s:%s default_script=%s pdf_export=%s version=%s",
        HOST, PORT, DEFAULT_SCRIPT, trigger.available(), VERSION,
    )
    if not trigger.available():
        _LOG.warning(
            "Playwright is not installed. PDF export will return 503; HTML and LaTeX output still work."
        )
    yield


app = FastAPI(title="Proposal Renderer", version="0.1.0", lifespan=lifespan)

# CORS: use ALLOWED_ORIGINS env (comma-separated) if set, else default
_origins_env = os.environ.get("ALLOWED_ORIGINS", "").strip()
if _origins_env:
    ALLOWED_ORIGINS = [o.strip() for o in _origins_env.split(",") if o.strip()]
else:
    ALLOWED_ORIGINS = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", "X-Request-Id"],
)


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())[:8]
        request.state.request_id = request_id
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        _LOG.info(
            "request_id=%s method=%s path=%s status=%s duration_ms=%.0f",
            request_id,
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
        )
        response.headers["X-Request-Id"] = request_id
        return response


app.add_middleware(RequestLogMiddleware)

# One shared trigger: its is_exporting flag turns concurrent PDF requests away with 409.
app.state.export_trigger = ExportTrigger(load_rasterizer())


@app.get("/health")
def health():
    return {"status": "ok", "version": VERSION, "scripts": list(SCRIPTS)}


@app.get("/health/pdf")
async def health_pdf():
    """
    Runtime check for Playwright PDF dependencies.
    Launches Chromium with the same args PDF export uses; 200 only when that succeeds.
    """
    rasterizer = PlaywrightRasterizer()
    if not rasterizer.is_available():
        raise HTTPException(status_code=503, detail="Playwright is not installed.")

    try:
        await rasterizer.check()
    except Exception as e:
        msg = str(e)
        if len(msg) > 500:
            msg = msg[:500]
        raise HTTPException(
            status_code=503,
            detail=f"Playwright runtime unavailable: {msg}",
        ) from e

    return {"status": "ok", "pdf_runtime": "ready", "launch_args": rasterizer.launch_args}


def _resolve_script(script: str) -> str:
    try:
        return check_script(script)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


def _content_disposition(filename: str) -> str:
    """Attachment header with an ASCII fallback plus the UTF-8 name (RFC 6266)."""
    fallback = re.sub(r"[^\x20-\x7e]", "_", filename).replace('"', "_")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


@app.get("/proposals")
def get_proposals_list():
    """Return ids of the seed proposals the editor can start from."""
    return list_proposals()


@app.get("/proposals/{proposal_id}")
def get_seed_proposal(proposal_id: str):
    """Return a seed proposal in the editor's camelCase shape."""
    proposal = get_proposal(proposal_id)
    if proposal is None:
        raise HTTPException(status_code=404, detail="Proposal not found")
    return proposal.model_dump(mode="json", by_alias=True)


@app.post("/proposal/preview", response_class=HTMLResponse)
def build_proposal_preview(proposal: ProposalData, script: str = Query(DEFAULT_SCRIPT)) -> HTMLResponse:
    """Return the print-ready document view as HTML (no Playwright required)."""
    script = _resolve_script(script)
    return HTMLResponse(build_proposal_html(proposal, script))


@app.post("/proposal/latex")
def build_proposal_latex_endpoint(proposal: ProposalData, script: str = Query(DEFAULT_SCRIPT)) -> Response:
    """Return the XeLaTeX source as a .tex attachment; compiling it is left to the caller."""
    script = _resolve_script(script)
    source = build_proposal_latex(proposal, script)
    filename = proposal_filename(proposal, extension="tex")
    return Response(
        content=source.encode("utf-8"),
        media_type="application/x-tex; charset=utf-8",
        headers={"Content-Disposition": _content_disposition(filename)},
    )


@app.post("/proposal/pdf")
async def build_proposal_pdf_endpoint(
    request: Request,
    proposal: ProposalData,
    script: str = Query(DEFAULT_SCRIPT),
) -> Response:
    """
    Rasterize the document view to an A4 PDF and return it as an attachment.
    503 when no rasterizer is installed, 502 when rendering fails, 409 while another export runs.
    """
    script = _resolve_script(script)
    trigger: ExportTrigger = request.app.state.export_trigger
    saved: dict[str, bytes] = {}

    def _save(filename: str, pdf_bytes: bytes) -> None:
        saved[filename] = pdf_bytes

    result = await trigger.export(proposal, _save, script=script)
    if result.status is ExportStatus.UNAVAILABLE:
        raise HTTPException(status_code=503, detail=result.message)
    if result.status is ExportStatus.BUSY:
        raise HTTPException(status_code=409, detail=result.message)
    if result.status is ExportStatus.FAILED:
        raise HTTPException(status_code=502, detail=result.message)

    return Response(
        content=saved[result.filename],
        media_type="application/pdf",
        headers={"Content-Disposition": _content_disposition(result.filename)},
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host=HOST, port=PORT)
