from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from cost_analyzer.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from cost_analyzer.excel.codec import PandasWorkbookCodec, WorkbookCodec
from cost_analyzer.excel.reader import WorkbookReadError
from cost_analyzer.logging.init import log_summary, setup_logging
from cost_analyzer.models.config_models import AnalyzerConfig, ExportParameters, PeriodSelection
from cost_analyzer.services.ingestor import HeaderNotFoundError, ingest
from cost_analyzer.services.orchestrator import ProcessingError, process_all, scan_workbooks
from cost_analyzer.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env (overrides the process environment) and the YAML config
- Scan source_directory for .xlsx/.xls/.csv workbooks (non-recursive)
- Analyze the selected period(s) of each workbook, write one report per workbook
- Print a SUMMARY line and exit with 0 (all ok), 2 (some workbook failed) or 1 (fatal)
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

CONFIG_ENV_VAR = "COST_ANALYZER_CONFIG"


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv; a broken file only produces a warning."""
    if not path.exists():
        return
    try:
        load_dotenv(dotenv_path=path, override=override)
    except (OSError, UnicodeDecodeError) as e:  # pragma: no cover
        print(f"WARNING: failed to load .env via python-dotenv: {e}")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Monthly unit-cost analyzer (單位成本 worksheets)")
    p.add_argument("--config", type=Path, default=None, help="Config YAML (default config/analyzer.yml)")
    p.add_argument("--month", default=None, help="Period to analyze, e.g. 202601 (default: newest)")
    p.add_argument("--end-month", default=None, help="End of an inclusive period range")
    p.add_argument("--rate", type=float, default=None, help="Exchange rate TWD per USD")
    p.add_argument("--watts", type=float, default=None, help="Watts per piece")
    p.add_argument("--list-periods", action="store_true", help="Print detected periods per workbook then exit")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _resolve_config_path(arg: Path | None) -> Path:
    if arg is not None:
        return arg
    env_path = os.getenv(CONFIG_ENV_VAR)
    return Path(env_path) if env_path else DEFAULT_CONFIG_PATH


def _list_periods(cfg: AnalyzerConfig, codec: WorkbookCodec) -> int:
    paths = scan_workbooks(Path(cfg.source_directory))
    if not paths:
        print("list-periods: no workbooks")
        return EXIT_SUCCESS_ALL
    for path in paths:
        print(f"FILE: {path.name}")
        try:
            metadata = ingest(codec.read(path.read_bytes(), path.name))
        except (OSError, WorkbookReadError, HeaderNotFoundError) as e:
            print(f"  error={e}")
            continue
        print(f"  header_row={metadata.header_row_index + 1} range={metadata.period_span}")
        print(f"  periods={list(metadata.periods)}")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None のときのみシステム引数を読む (テストの cli_main([]) 対策)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    try:
        cfg = load_config(_resolve_config_path(args.config))
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    directory = Path(cfg.source_directory)
    if not directory.exists():
        logger.error(f"directory not found: {directory}")
        return EXIT_FATAL

    if args.debug:
        for h in logger.handlers:
            h.setLevel("DEBUG")
        logger.setLevel("DEBUG")
        logger.debug("debug mode enabled")

    if args.end_month is not None and args.month is None:
        logger.error("--end-month requires --month")
        return EXIT_FATAL

    codec = PandasWorkbookCodec(cfg.sheet_keyword)
    if args.list_periods:
        return _list_periods(cfg, codec)

    selection = PeriodSelection(start=args.month, end=args.end_month)
    params = ExportParameters(
        exchange_rate=args.rate if args.rate is not None else cfg.exchange_rate,
        watts_per_piece=args.watts if args.watts is not None else cfg.watts_per_piece,
    )
    logger.info(f"Analyzing workbooks from: {directory}")

    try:
        result = process_all(cfg, selection, params, codec)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    summary_line = render_summary_line(result)
    # log_summary が "SUMMARY " を付与するため除去
    log_summary(summary_line[len("SUMMARY "):])

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
