#!/usr/bin/env python
"""
proofread.py - Check a passage with the analysis model and reconcile its corrections.

Core modes
──────────
1. Check a file              $ proofdesk check letter.txt
2. Accept everything         $ proofdesk check letter.txt --apply-all -o letter.fixed.txt
3. Review one by one         $ proofdesk check letter.txt --interactive
4. Browse past analyses      $ proofdesk history ; proofdesk show 2
"""

from __future__ import annotations

import argparse
import pathlib
import sys
from dataclasses import replace
from datetime import datetime
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table
from rich.text import Text

from proofdesk.core.analysis import AnalysisOrchestrator
from proofdesk.core.applier import count_occurrences
from proofdesk.core.errors import AnalysisError
from proofdesk.core.highlight import CATEGORY_STYLES
from proofdesk.core.history import HistoryStore
from proofdesk.core.report import render_html_page
from proofdesk.core.session import EditorSession
from proofdesk.utils.io_helpers import ensure_utf8_windows, normalize_text, read_utf8, write_utf8
from proofdesk.utils.logging_helper import get_logger
from proofdesk.utils.settings import Settings, load_settings
from proofdesk.utils.text_processing import preview

# ── logging setup ────────────────────────────────────────────────────────────
log = get_logger()

console = Console()

EXIT_FAILURE = 1
EXIT_NEEDS_SETUP = 2


# ── helpers ──────────────────────────────────────────────────────────────────
def load_input(source: str) -> str:
    """Read the passage from a file path, or stdin for ``-``."""
    if source == "-":
        return normalize_text(sys.stdin.read())
    path = pathlib.Path(source)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")
    return normalize_text(read_utf8(path))


def build_session(settings: Settings, orchestrator: Optional[AnalysisOrchestrator] = None) -> EditorSession:
    history = HistoryStore(settings.history_path, capacity=settings.history_capacity).load()
    orchestrator = orchestrator or AnalysisOrchestrator(settings)
    return EditorSession(orchestrator, history, stale_threshold=settings.stale_threshold)


def report_error(error: AnalysisError) -> int:
    if error.needs_setup:
        console.print(f"[bold yellow]Setup required:[/] {error}")
        return EXIT_NEEDS_SETUP
    console.print(f"[bold red]Error:[/] {error}")
    return EXIT_FAILURE


def show_session(session: EditorSession) -> None:
    stats = session.stats()
    console.print(Panel(session.render().to_rich(),
                        title="Text",
                        subtitle=f"{stats['chars']} characters · {stats['words']} words"))
    result = session.result
    if result is None:
        return
    if result.is_fully_correct:
        console.print(f"[bold green]✨ Your text is correct![/] {escape(result.summary)}")
        return

    console.print(f"[bold blue]📝 Found points to improve:[/] {escape(result.summary)}")
    table = Table(box=box.ROUNDED)
    table.add_column("#", justify="right")
    table.add_column("Type")
    table.add_column("Original")
    table.add_column("Suggestion")
    table.add_column("Reason")
    for i, c in enumerate(result.corrections, 1):
        style = CATEGORY_STYLES[c.category]
        table.add_row(str(i), f"[{style}]{c.category.value}[/]", escape(c.original_span),
                      escape(c.suggested_span), escape(c.rationale))
    console.print(table)


def review_interactively(session: EditorSession) -> int:
    """Ask about each open correction; returns how many were accepted."""
    accepted = 0
    for correction in list(session.result.corrections if session.result else ()):
        # an earlier accept may already have resolved an identical correction
        if session.result is None or correction.identity not in {c.identity for c in session.result.corrections}:
            continue
        hits = count_occurrences(session.buffer, correction.original_span)
        question = (f"{correction.original_span!r} → {correction.suggested_span!r} "
                    f"({correction.category.value}, {hits} occurrence{'s' if hits != 1 else ''})? ")
        if Confirm.ask(escape(question), default=True, console=console):
            session.apply_single(correction)
            accepted += 1
    return accepted


# ── sub-commands ─────────────────────────────────────────────────────────────
def cmd_check(args, settings: Settings) -> int:
    session = build_session(settings)
    session.edit(load_input(args.input))

    try:
        with console.status("[bold yellow]Analyzing text...[/]", spinner="dots"):
            session.check()
    except AnalysisError as e:
        return report_error(e)

    show_session(session)

    changed = False
    if args.apply_all and session.can_apply_all:
        session.apply_all()
        changed = True
        console.print("[bold green]Applied all corrections.[/]")
    elif args.interactive and session.can_apply_all:
        accepted = review_interactively(session)
        changed = accepted > 0
        console.print(f"[bold green]Applied {accepted} correction(s).[/]")

    if args.html:
        html_path = pathlib.Path(args.html)
        write_utf8(html_path, render_html_page(session.render(), session.result))
        console.print(f"[bold green]HTML report generated:[/] [blue]{html_path}[/]")

    if args.output:
        write_utf8(pathlib.Path(args.output), session.buffer)
        console.print(f"[bold green]Corrected text written to:[/] [blue]{args.output}[/]")
    elif changed:
        console.print(Panel(Text(session.buffer), title="Corrected text"))
    return 0


def cmd_history(args, settings: Settings) -> int:
    history = HistoryStore(settings.history_path, capacity=settings.history_capacity).load()
    if not len(history):
        console.print("No history yet.")
        return 0
    table = Table(title="Recent analyses", box=box.ROUNDED)
    table.add_column("#", justify="right")
    table.add_column("When")
    table.add_column("Corrections", justify="right")
    table.add_column("Text")
    for i, entry in enumerate(history.entries, 1):
        when = datetime.fromtimestamp(entry.timestamp / 1000).strftime("%Y-%m-%d %H:%M")
        table.add_row(str(i), when, str(len(entry.result.corrections)), escape(preview(entry.source_text, 60)))
    console.print(table)
    return 0


def cmd_show(args, settings: Settings) -> int:
    session = build_session(settings)
    entries = session.history.entries
    if not 1 <= args.index <= len(entries):
        console.print(f"[bold red]Error:[/] No history entry #{args.index} ({len(entries)} stored)")
        return EXIT_FAILURE
    session.select_history(entries[args.index - 1])
    show_session(session)
    return 0


def cmd_clear_history(args, settings: Settings) -> int:
    history = HistoryStore(settings.history_path, capacity=settings.history_capacity).load()
    count = len(history)
    history.clear()
    console.print(f"Cleared {count} history entr{'y' if count == 1 else 'ies'}.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="proofdesk", description="Proofread text with an LLM and reconcile its corrections")
    ap.add_argument("--config", help="Path to YAML configuration file")
    ap.add_argument("--model", help="Override the analysis model")
    sub = ap.add_subparsers(dest="command", required=True)

    check = sub.add_parser("check", help="Analyze a passage")
    check.add_argument("input", help="Text file to check, or - for stdin")
    mode = check.add_mutually_exclusive_group()
    mode.add_argument("--apply-all", action="store_true", help="Accept the fully corrected text")
    mode.add_argument("--interactive", "-i", action="store_true", help="Review corrections one by one")
    check.add_argument("--output", "-o", help="Write the resulting text here")
    check.add_argument("--html", metavar="PATH", help="Write a highlighted HTML report")
    check.set_defaults(func=cmd_check)

    history = sub.add_parser("history", help="List recent analyses")
    history.set_defaults(func=cmd_history)

    show = sub.add_parser("show", help="Show a past analysis")
    show.add_argument("index", type=int, help="Entry number as listed by 'history'")
    show.set_defaults(func=cmd_show)

    clear = sub.add_parser("clear-history", help="Forget all past analyses")
    clear.set_defaults(func=cmd_clear_history)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    ensure_utf8_windows()
    args = build_parser().parse_args(argv)
    try:
        settings = load_settings(pathlib.Path(args.config) if args.config else None)
        if args.model:
            settings = replace(settings, model=args.model)
        return args.func(args, settings)
    except (FileNotFoundError, ValueError) as e:
        log.error(str(e))
        console.print(f"[bold red]Error:[/] {e}")
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
