"""Command-line interface for the icon deduplication tool."""

from __future__ import annotations

import argparse
import json
import logging
import tempfile
from dataclasses import asdict
from pathlib import Path
from typing import Iterable, Sequence

from .features.compare import ComparisonError
from .features.fingerprint import FingerprintError
from .features.raster import RasterizationError
from .group.decisions import PREFERRED_STYLE
from .group.exact import resolve_exact
from .group.visual import CLUSTER_INVOLVED, CLUSTERING_MODES, resolve_visual
from .io.consumer import ReportFormatError, delete_marked, load_report
from .io.models import IconDecision
from .io.outputs import (
    DEFAULT_EXACT_REPORT,
    DEFAULT_VISUAL_REPORT,
    LAYOUT_MERGED,
    REPORT_LAYOUTS,
    compute_stats,
    exact_report_payload,
    print_summary,
    visual_report_payload,
    write_plan_table,
    write_report,
    write_stats,
)
from .mark.marker import load_components, mark_components
from .scan.grouper import (
    DEFAULT_EXTENSION,
    DEFAULT_ICON_DIR,
    DEFAULT_STYLES,
    IconGroups,
    group_icons_by_name,
    normalize_extension,
)

logger = logging.getLogger(__name__)

_FATAL_ERRORS = (FingerprintError, RasterizationError, ComparisonError)


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments for the deduplication commands."""
    parser = argparse.ArgumentParser(
        prog="icon-dedup",
        description="Find redundant style variants of icons and plan their removal.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    exact = commands.add_parser("exact", help="Find byte-identical style variants.")
    _add_scan_arguments(exact)
    exact.add_argument(
        "--report",
        default=str(DEFAULT_EXACT_REPORT),
        help="Where to write the JSON report (default: %(default)s).",
    )
    exact.add_argument(
        "--layout",
        choices=REPORT_LAYOUTS,
        default=LAYOUT_MERGED,
        help="Report entry shape: one merged object or a list of clusters per icon.",
    )
    _add_output_arguments(exact)

    visual = commands.add_parser("visual", help="Find visually identical style variants.")
    _add_scan_arguments(visual)
    visual.add_argument(
        "--report",
        default=str(DEFAULT_VISUAL_REPORT),
        help="Where to write the JSON report (default: %(default)s).",
    )
    visual.add_argument(
        "--scratch-dir",
        default=None,
        help="Directory for rendered bitmaps; kept after the run. A temporary "
        "directory is used and removed when omitted.",
    )
    visual.add_argument(
        "--clustering",
        choices=CLUSTERING_MODES,
        default=CLUSTER_INVOLVED,
        help="'involved' builds one cluster from every style with an equal pair; "
        "'components' splits the equal pairs into connected components.",
    )
    _add_output_arguments(visual)

    apply = commands.add_parser("apply", help="Delete the files a report marks for removal.")
    apply.add_argument("--report", required=True, help="Report produced by 'exact' or 'visual'.")
    apply.add_argument(
        "--icons",
        default=str(DEFAULT_ICON_DIR),
        help="Root directory holding one subdirectory per style (default: %(default)s).",
    )
    apply.add_argument("--ext", default=DEFAULT_EXTENSION, help="Icon file extension.")
    apply.add_argument(
        "-n",
        "--dry-run",
        action="store_true",
        help="List the files that would be deleted without deleting them.",
    )

    mark = commands.add_parser("mark", help="Plan which design-library variants to flag.")
    mark.add_argument("--report", required=True, help="Report produced by 'exact' or 'visual'.")
    mark.add_argument(
        "--components",
        required=True,
        help="JSON export of component sets: [{\"name\": ..., \"variants\": [...]}].",
    )
    mark.add_argument("--out", default=None, help="Optional path for the marking plan JSON.")
    return parser.parse_args(list(argv) if argv is not None else None)


def _add_scan_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--icons",
        default=str(DEFAULT_ICON_DIR),
        help="Root directory holding one subdirectory per style (default: %(default)s).",
    )
    parser.add_argument(
        "--styles",
        default=",".join(DEFAULT_STYLES),
        help="Comma separated style directory names (default: %(default)s).",
    )
    parser.add_argument("--ext", default=DEFAULT_EXTENSION, help="Icon file extension.")
    parser.add_argument(
        "--prefer",
        default=PREFERRED_STYLE,
        help="Style kept whenever it is part of a duplicate cluster (default: %(default)s).",
    )


def _add_output_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--metrics", default=None, help="Optional path for statistics JSON.")
    parser.add_argument(
        "--plan-table",
        default=None,
        help="Optional flat removal plan; .csv writes CSV, anything else Parquet.",
    )


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _parse_styles(raw: str) -> list[str]:
    styles = [style.strip() for style in raw.split(",") if style.strip()]
    if not styles:
        raise ValueError("At least one style must be given")
    return list(dict.fromkeys(styles))


def _scan(args: argparse.Namespace) -> tuple[IconGroups, list[str]]:
    styles = _parse_styles(args.styles)
    icon_dir = Path(args.icons)
    if not icon_dir.is_dir():
        logger.warning("Icon directory %s does not exist; nothing to scan", icon_dir)
    groups = group_icons_by_name(icon_dir, styles, normalize_extension(args.ext))
    logger.info("Grouped %d icon names across %d styles", len(groups), len(styles))
    return groups, styles


def _emit(
    args: argparse.Namespace,
    decisions: dict[str, IconDecision],
    groups: IconGroups,
    styles: Sequence[str],
    payload: dict,
    title: str,
) -> None:
    report_path = write_report(Path(args.report), payload)
    stats = compute_stats(decisions, total_icons=len(groups), styles=styles)
    if args.metrics:
        write_stats(Path(args.metrics), stats)
    if args.plan_table:
        write_plan_table(Path(args.plan_table), decisions, groups)
    print_summary(stats, report_path, title=title)


def run_exact(args: argparse.Namespace) -> int:
    groups, styles = _scan(args)
    decisions = resolve_exact(groups, preferred=args.prefer)
    payload = exact_report_payload(decisions, layout=args.layout)
    _emit(args, decisions, groups, styles, payload, title="Exact deduplication")
    return 0


def run_visual(args: argparse.Namespace) -> int:
    groups, styles = _scan(args)
    if args.scratch_dir:
        decisions = resolve_visual(
            groups, Path(args.scratch_dir), preferred=args.prefer, clustering=args.clustering
        )
    else:
        with tempfile.TemporaryDirectory(prefix="icon-dedup-") as scratch:
            decisions = resolve_visual(
                groups, Path(scratch), preferred=args.prefer, clustering=args.clustering
            )
    payload = visual_report_payload(decisions)
    _emit(args, decisions, groups, styles, payload, title="Visual deduplication")
    return 0


def run_apply(args: argparse.Namespace) -> int:
    report = load_report(Path(args.report))
    deleted = delete_marked(report, Path(args.icons), normalize_extension(args.ext), dry_run=args.dry_run)
    verb = "would be deleted" if args.dry_run else "deleted"
    print(f"[apply] {len(deleted)} files {verb} using {args.report}")
    return 0


def run_mark(args: argparse.Namespace) -> int:
    report = load_report(Path(args.report))
    components = load_components(Path(args.components))
    marked = mark_components(components, report)
    for item in marked:
        print(f"[mark] {item.component}: {item.variant} -> {item.marked_name} ({item.reason})")
    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(
            json.dumps([asdict(item) for item in marked], indent=2, ensure_ascii=False) + "\n",
            encoding="utf-8",
        )
    print(f"[mark] {len(marked)} variants flagged")
    return 0


_COMMANDS = {
    "exact": run_exact,
    "visual": run_visual,
    "apply": run_apply,
    "mark": run_mark,
}


def main(argv: Iterable[str] | None = None) -> int:
    """Entry point for the CLI."""
    args = parse_args(argv)
    _configure_logging(args.verbose)
    try:
        return _COMMANDS[args.command](args)
    except _FATAL_ERRORS as exc:
        logger.error("Aborting, no report written: %s", exc)
    except FileNotFoundError as exc:
        logger.error("%s; nothing was changed", exc)
    except (ReportFormatError, ValueError) as exc:
        logger.error("Invalid input: %s", exc)
    except OSError as exc:
        logger.error("File system error: %s", exc)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
