"""
Render a proposal to HTML, LaTeX source and/or PDF on disk.

Usage:
  cd backend
  python3 scripts/generate_proposal.py                       # seed proposal, all formats, both scripts
  python3 scripts/generate_proposal.py --input proposal.json --script zh-Hant --format pdf
"""
from __future__ import annotations

import argparse
import asyncio
import json
import os
from pathlib import Path
import sys

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from models import ProposalData
from proposals import DEFAULT_PROPOSAL
from reporting.export import ExportTrigger
from reporting.latex_builder import build_proposal_latex
from reporting.locale_text import SCRIPTS
from reporting.rasterizer import load_rasterizer
from reporting.report_builder import build_proposal_html
from reporting.report_data import proposal_filename


OUT_DIR = Path(os.getenv("PROPOSAL_OUTPUT_DIR", str(BACKEND_DIR / "reports" / "proposals")))
FORMATS = ("html", "tex", "pdf")


def _load_proposal(path: str | None) -> ProposalData:
    if not path:
        return DEFAULT_PROPOSAL
    return ProposalData.model_validate(json.loads(Path(path).read_text(encoding="utf-8")))


def _script_dir(out_dir: Path, script: str) -> Path:
    target = out_dir / script
    target.mkdir(parents=True, exist_ok=True)
    return target


def write_outputs(
    proposal: ProposalData,
    script: str,
    formats: tuple[str, ...],
    out_dir: Path,
    trigger: ExportTrigger | None = None,
) -> list[Path]:
    """Write each requested format for one script; returns the paths actually written."""
    target = _script_dir(out_dir, script)
    written: list[Path] = []

    if "html" in formats:
        path = target / proposal_filename(proposal, extension="html")
        path.write_text(build_proposal_html(proposal, script), encoding="utf-8")
        written.append(path)
        print(f"[proposal] wrote {path}")

    if "tex" in formats:
        path = target / proposal_filename(proposal, extension="tex")
        path.write_text(build_proposal_latex(proposal, script), encoding="utf-8")
        written.append(path)
        print(f"[proposal] wrote {path}")

    if "pdf" in formats:
        if trigger is None:
            trigger = ExportTrigger(load_rasterizer())

        def _save(filename: str, pdf_bytes: bytes) -> None:
            path = target / filename
            path.write_bytes(pdf_bytes)
            written.append(path)

        result = asyncio.run(trigger.export(proposal, _save, script=script))
        if result.ok:
            print(f"[proposal] wrote {target / result.filename}")
        else:
            print(f"[proposal] {script}: PDF skipped ({result.message})")

    return written


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Render a proposal document.")
    parser.add_argument("--input", help="Proposal JSON file (camelCase or snake_case keys). Defaults to the seed proposal.")
    parser.add_argument("--script", choices=SCRIPTS + ("all",), default="all")
    parser.add_argument("--format", choices=FORMATS + ("all",), default="all")
    parser.add_argument("--out", default=str(OUT_DIR), help="Output directory")
    args = parser.parse_args(argv)

    proposal = _load_proposal(args.input)
    scripts = SCRIPTS if args.script == "all" else (args.script,)
    formats = FORMATS if args.format == "all" else (args.format,)
    out_dir = Path(args.out)

    trigger = ExportTrigger(load_rasterizer()) if "pdf" in formats else None
    for script in scripts:
        write_outputs(proposal, script, formats, out_dir, trigger=trigger)
    print(f"[proposal] complete. Outputs in {out_dir}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
