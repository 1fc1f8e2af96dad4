from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from caneflow.config.loader import (
    CONFIG_ENV_VAR,
    CaneflowConfig,
    ConfigError,
    default_config,
    load_config,
)
from caneflow.core.groups import summarize_groups
from caneflow.excel.legacy import LegacyConversionError
from caneflow.excel.reader import InputFileNotFoundError, SheetNotFoundError, WorkbookReadError
from caneflow.excel.writer import WorkbookWriteError
from caneflow.logging.init import log_summary, setup_logging
from caneflow.models.conversion import ConversionRequest
from caneflow.models.export_options import PriceMode
from caneflow.services.converter import ConversionError, convert_file, preview_file
from caneflow.services.progress import RowProgressBar
from caneflow.services.summary import render_preview_summary_line, render_summary_line

"""Command line entry point.

    caneflow preview INPUT [--sheet NAME]
    caneflow convert INPUT [-o OUTPUT] [--unit-price P] [--tva T] ...

Command line values override the config file, which overrides built-in
defaults. Config file lookup: --config, then $CANEFLOW_CONFIG, then
./caneflow.yml when present.
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1

DEFAULT_CONFIG_FILE = Path("caneflow.yml")

# Errors reported as "ERROR <message>" with exit code 1
_FATAL_ERRORS = (
    ConfigError,
    ConversionError,
    InputFileNotFoundError,
    SheetNotFoundError,
    WorkbookReadError,
    WorkbookWriteError,
    LegacyConversionError,
)


def _load_env_file(path: Path, override: bool = False) -> None:
    """Load .env (CANEFLOW_CONFIG / CANEFLOW_SOFFICE) when present."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _group_price(text: str) -> tuple[str, str]:
    key, sep, price = text.rpartition("=")
    if not sep:
        raise argparse.ArgumentTypeError(f"expected KEY=PRICE, got {text!r}")
    return key.strip(), price.strip()


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="caneflow", description="Caneco -> Multidoc converter")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--config", type=Path, default=None, help="YAML config file")
    sub = p.add_subparsers(dest="command", required=True)

    prev = sub.add_parser("preview", help="List parsed rows and cable groups")
    prev.add_argument("input", type=Path, help="Caneco workbook (.xlsx or .xls)")
    prev.add_argument("--sheet", default=None, help="Worksheet name (default: first)")

    conv = sub.add_parser("convert", help="Write the Multidoc workbook")
    conv.add_argument("input", type=Path, help="Caneco workbook (.xlsx or .xls)")
    conv.add_argument("-o", "--output", type=Path, default=None, help="Output .xlsx path")
    conv.add_argument("--sheet", default=None, help="Worksheet name (default: first)")
    conv.add_argument("--unit-price", default=None, help="Default unit price")
    conv.add_argument("--tva", default=None, help="Default TVA rate")
    conv.add_argument("--unit", default=None, help="Unit label (default: ml)")
    conv.add_argument("--no-headers", action="store_true", help="Omit the header row")
    conv.add_argument(
        "--price-mode",
        choices=[m.value for m in PriceMode],
        default=None,
        help="Which price overrides to apply",
    )
    conv.add_argument(
        "--group-price",
        type=_group_price,
        action="append",
        default=[],
        metavar="KEY=PRICE",
        help='Price for a cable group, e.g. "3G2.5 | U1000 R2V=10" (repeatable)',
    )
    conv.add_argument(
        "--line-price",
        action="append",
        default=[],
        metavar="PRICE",
        help="Price for the next preview line, in order (repeatable)",
    )
    return p


def _resolve_config(explicit: Path | None) -> CaneflowConfig:
    if explicit is not None:
        return load_config(explicit)
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return load_config(Path(env_path))
    if DEFAULT_CONFIG_FILE.exists():
        return load_config(DEFAULT_CONFIG_FILE)
    return default_config()


def _build_request(args: argparse.Namespace, cfg: CaneflowConfig) -> ConversionRequest:
    pricing = cfg.pricing
    mode = PriceMode(args.price_mode) if args.price_mode else pricing.mode
    by_type = dict(pricing.unit_prices_by_type)
    by_type.update(dict(args.group_price))
    return ConversionRequest(
        input_path=args.input,
        output_path=args.output,
        sheet_name=args.sheet or cfg.input_sheet_name,
        output_sheet_name=cfg.output_sheet_name,
        price_mode=mode,
        default_unit_price=(
            args.unit_price if args.unit_price is not None else pricing.default_unit_price
        ),
        default_tva=args.tva if args.tva is not None else pricing.default_tva,
        default_unit=args.unit if args.unit is not None else pricing.default_unit,
        include_headers=cfg.include_headers and not args.no_headers,
        unit_prices=list(args.line_price) if args.line_price else list(pricing.unit_prices),
        unit_prices_by_type=by_type,
    )


def _run_preview(args: argparse.Namespace, cfg: CaneflowConfig) -> int:
    with RowProgressBar("Lecture") as bar:
        items = preview_file(
            args.input,
            args.sheet or cfg.input_sheet_name,
            on_progress=bar,
            legacy=cfg.legacy,
        )
    for item in items:
        print(f"{item.line_number:>4}  {item.quantity!s:>8}  {item.type_cable or '-'}  {item.title}")
    groups = summarize_groups(items)
    if groups:
        print("Groupes:")
        for group in groups:
            print(f"  {group.label}: {group.count}")
    log_summary(render_preview_summary_line(len(items), len(groups)))
    return EXIT_SUCCESS


def _run_convert(args: argparse.Namespace, cfg: CaneflowConfig) -> int:
    request = _build_request(args, cfg)
    with RowProgressBar("Conversion") as bar:
        result = convert_file(request, on_progress=bar, legacy=cfg.legacy)
    log_summary(render_summary_line(result, request.include_headers))
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    # None only: an explicit [] from tests must not pick up pytest's argv
    if argv is None:
        argv = sys.argv[1:]
    args = _build_parser().parse_args(argv)

    logger = setup_logging(debug=args.debug)
    if args.debug:
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"))

    try:
        cfg = _resolve_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL
    if args.debug:
        logger.debug(f"config: {cfg}")

    try:
        if args.command == "preview":
            return _run_preview(args, cfg)
        return _run_convert(args, cfg)
    except _FATAL_ERRORS as e:
        logger.error(str(e))
        return EXIT_FATAL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
