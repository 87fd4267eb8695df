from __future__ import annotations
import argparse
import os
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from libskel.config import ExtractionPolicy
from libskel.discovery import InvalidDirectoryError, find_skel_files
from libskel.orchestrator import ExtractionOrchestrator
from libskel.report import Reporter
from libskel.summary import format_report, save_report, summarize_skel
from libskel.writer import write_lua

console = Console()


def _outcome_table(title: str, rows) -> Table:
    t = Table(title=title)
    t.add_column("File", overflow="fold")
    t.add_column("Strategy", justify="center")
    t.add_column("Animations", justify="right")
    for ident, oc in rows:
        strategy = oc.strategy.value if oc.strategy else "-"
        t.add_row(escape(ident), strategy, str(len(oc.records)))
    return t


def cmd_extract(args: argparse.Namespace) -> int:
    policy = ExtractionPolicy.from_args(args)
    reporter = Reporter(debug=policy.debug, console=console)
    folder = args.folder

    try:
        files = find_skel_files(folder, policy.extension)
    except InvalidDirectoryError as e:
        reporter.error(str(e))
        return 1

    reporter.info(f"Scanning for {policy.extension} files in: {folder}")
    if policy.force_predefined:
        reporter.info("Force predefined mode enabled - using predefined animation lists based on filenames")
    elif policy.auto_predefined:
        reporter.info("Auto predefined mode enabled - will fall back to predefined animations if parsing fails")

    if not files:
        reporter.info(f"No {policy.extension} files found in the directory.")
        return 0

    reporter.info(f"Found {len(files)} {policy.extension} files")
    for path in files:
        reporter.debug(f" - {path} ({os.path.getsize(path)} bytes)")

    orchestrator = ExtractionOrchestrator(policy, reporter=reporter)
    outcomes = orchestrator.extract_batch(files, folder)

    out = args.out or os.path.join(folder, "output.lua")
    written = write_lua(outcomes, out)

    console.print(_outcome_table("Extraction results", outcomes.items()))
    s = orchestrator.stats
    console.print(
        f"[bold]Attempted:[/bold] {s.attempted}   [bold]Succeeded:[/bold] {s.succeeded}   "
        f"[bold]Predefined:[/bold] {s.predefined}   [bold]Failed:[/bold] {s.failed}"
    )
    console.print(f"[green]Done.[/green] Wrote {written} entries to {escape(os.path.abspath(out))}")
    return 0


def cmd_summary(args: argparse.Namespace) -> int:
    if not os.path.isfile(args.skel):
        console.print(f"[bold red]Error:[/bold red] File not found: {escape(args.skel)}")
        return 2

    policy = ExtractionPolicy.from_args(args)
    reporter = Reporter(debug=policy.debug, console=console)
    s = summarize_skel(args.skel, policy, reporter)
    oc = s.outcome

    console.print(f"[bold]File:[/bold] {escape(s.path)}")
    console.print(f"[bold]Size:[/bold] {s.file_size} bytes")
    console.print(f"[bold]Version:[/bold] {escape(s.version or '(unreadable)')}")
    console.print(f"[bold]Strategy:[/bold] {oc.strategy.value if oc.strategy else '(none)'}")

    at = Table(title="Cascade attempts")
    at.add_column("Step")
    at.add_column("Found", justify="right")
    at.add_column("Error", overflow="fold")
    for a in oc.attempts:
        at.add_row(a.label, str(a.count), escape(a.error or ""))
    console.print(at)

    t = Table(title="Animations")
    t.add_column("Name", overflow="fold")
    t.add_column("Duration", justify="right")
    t.add_column("Loop", justify="center")
    if oc.records:
        for r in oc.records:
            t.add_row(escape(r.name), f"{r.duration:.2f}", str(r.is_loop))
    else:
        t.add_row("(none found)", "-", "-")
    console.print(t)

    if args.save_report:
        path = save_report(s)
        console.print(f"Animation information saved to: {escape(path)}")
    elif args.print_report:
        console.print(escape(format_report(s)))
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="skelcli")
    sub = p.add_subparsers(dest="cmd", required=True)

    def add_policy_flags(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("--debug", action="store_true", help="Detailed processing information")
        sp.add_argument("--force-predefined", action="store_true",
                        help="Use predefined animation lists based on file names, never parse")
        sp.add_argument("--no-auto-predefined", action="store_true",
                        help="Don't fall back to predefined lists when parsing finds nothing")

    e = sub.add_parser("extract", help="Extract animations from every skeleton file under a folder into a Lua table")
    e.add_argument("folder")
    e.add_argument("--out", help="Lua output path (default: <folder>/output.lua)")
    e.add_argument("--ext", default=".skel", help="Skeleton file extension (case-insensitive)")
    add_policy_flags(e)
    e.set_defaults(fn=cmd_extract)

    s = sub.add_parser("summary", help="Print the animations recovered from one skeleton file")
    s.add_argument("skel")
    s.add_argument("--save-report", action="store_true",
                   help="Write <name>_animations_<timestamp>.txt beside the input")
    s.add_argument("--print-report", action="store_true", help="Also print the plain-text report")
    add_policy_flags(s)
    s.set_defaults(fn=cmd_summary)

    return p


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return int(args.fn(args))


if __name__ == "__main__":
    raise SystemExit(main())
