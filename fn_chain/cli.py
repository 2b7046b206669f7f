"""
fn_chain/cli.py — Command-line interface for fn_chain.

Usage:
    fn-chain serialize                          # chain 100% of functions
    fn-chain serialize --serialization 50       # chain half of them
    fn-chain serialize --attribute Arn --dry-run
    fn-chain check                              # validate only, no writes

Both commands read backend-config.json from the working directory unless
--config-file is given. Templates are looked up under ./function/<name>/.

Exit codes: 0 success, 1 bad input or circular dependency, 2 usage error.

Author: Jay Gutierrez, PhD
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
import time

from fn_chain.config import DEFAULT_CONFIG, ChainConfig
from fn_chain.graph.cycles import format_cycle
from fn_chain.io.backend_config import BackendConfigError
from fn_chain.pipeline import PipelineResult, check_backend_config, run_serialization
from fn_chain.serialization.synthesizer import CircularDependencyError


# ── Logging setup ─────────────────────────────────────────────────────────────

def _setup_logging(level: str = "INFO") -> None:
    """Configure root logger with timestamps and level names."""
    numeric = getattr(logging, level.upper(), logging.INFO)
    fmt = "%(asctime)s  %(levelname)-8s  %(name)s — %(message)s"
    datefmt = "%H:%M:%S"
    logging.basicConfig(level=numeric, format=fmt, datefmt=datefmt, stream=sys.stderr)


logger = logging.getLogger("fn_chain.cli")


def _percentage(value: str) -> int:
    """argparse type: integer in [0, 100]."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
    if not 0 <= number <= 100:
        raise argparse.ArgumentTypeError("Serialization must be a number between 0 and 100.")
    return number


def _config_path(args: argparse.Namespace) -> str:
    return args.config_file or os.path.join(os.getcwd(), DEFAULT_CONFIG.config_file_name)


def _print_metrics(result: PipelineResult) -> None:
    m = result.metrics
    print(f"  Total functions      : {m.total_functions}")
    print(f"  Dependency-free      : {m.dependency_free}")
    print(f"  Current serialization: {m.current_percentage:.1f}%")
    print(f"  Target serialization : {m.target_percentage}%")
    print(f"  To serialize         : {max(m.total_to_serialize, 0)}")
    print(f"  First function       : {result.endpoints.first or '(none)'}")
    print(f"  Last in chain        : {result.endpoints.last or '(none)'}")


# ── Subcommand: serialize ─────────────────────────────────────────────────────

def cmd_serialize(args: argparse.Namespace) -> int:
    """Synthesize dependencies, validate, write config, update templates."""
    _setup_logging(args.log_level)

    config_path = _config_path(args)

    t0 = time.monotonic()
    try:
        config = ChainConfig(
            serialization_percentage=args.serialization,
            attribute=args.attribute,
            mark_every_source=args.mark_every_source,
        )
        result = run_serialization(
            config_path,
            config=config,
            function_root=args.function_dir,
            dry_run=args.dry_run,
            update_template_files=not args.skip_templates,
            summary_csv=args.summary_csv,
        )
    except BackendConfigError as exc:
        logger.error("Error: %s", exc)
        return 1
    except CircularDependencyError as exc:
        logger.error("%s", exc)
        print(f"\n  Circular dependency: {format_cycle(exc.path)}")
        print("  Nothing was written. Re-run with a different --serialization.")
        return 1
    except (ValueError, OSError) as exc:
        logger.error("Error: %s", exc)
        return 1
    elapsed = time.monotonic() - t0

    print()
    print("=" * 60)
    print("  FN CHAIN — SERIALIZE COMPLETE" + (" (dry run)" if args.dry_run else ""))
    print("=" * 60)
    print(f"  Elapsed              : {elapsed:.2f}s")
    print(f"  Config file          : {config_path}")
    _print_metrics(result)
    print(f"  Dependencies added   : {len(result.added_edges)}")
    for source, target in result.added_edges:
        print(f"    + {source} -> {target}")

    templates = result.template_result
    if templates is None:
        print("  Templates            : skipped")
    elif templates.skipped:
        print(f"  Templates            : skipped, missing for {', '.join(templates.missing)}")
    else:
        print(f"  Templates updated    : {len(templates.updated)}")
    print("=" * 60)

    return 0


# ── Subcommand: check ─────────────────────────────────────────────────────────

def cmd_check(args: argparse.Namespace) -> int:
    """Validate the existing config: metrics, endpoints, cycles. Never writes config."""
    _setup_logging(args.log_level)

    config_path = _config_path(args)
    try:
        result = check_backend_config(
            config_path,
            config=ChainConfig(serialization_percentage=args.serialization),
            summary_csv=args.summary_csv,
        )
    except (ValueError, OSError) as exc:
        logger.error("Error: %s", exc)
        return 1

    print()
    print("=" * 60)
    print("  FN CHAIN — CHECK")
    print("=" * 60)
    print(f"  Config file          : {config_path}")
    _print_metrics(result)
    if result.cycle:
        print(f"  Circular dependency  : {format_cycle(result.cycle)}")
    else:
        print("  Circular dependency  : none")
    print("=" * 60)

    return 1 if result.cycle else 0


# ── Argument parser ───────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fn-chain",
        description=(
            "fn_chain — Synthetic function-dependency chains for backend configs.\n"
            "Reads backend-config.json from the working directory by default."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Chain every dependency-free function
  fn-chain serialize

  # Chain half of the functions, using the Arn attribute
  fn-chain serialize --serialization 50 --attribute Arn

  # Preview without writing anything
  fn-chain serialize --dry-run --summary-csv summary.csv

  # Validate an existing config
  fn-chain check
        """,
    )

    # Global flags
    parser.add_argument(
        "--config-file",
        default=None,
        metavar="PATH",
        help=f"Backend config path (default: ./{DEFAULT_CONFIG.config_file_name})",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: INFO)",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    # serialize
    p_serialize = subparsers.add_parser(
        "serialize",
        help="Add synthetic function dependencies and update templates",
    )
    p_serialize.add_argument(
        "--serialization",
        type=_percentage,
        default=DEFAULT_CONFIG.serialization_percentage,
        metavar="PERCENT",
        help="Set the percentage for function serialization, 0-100 (default: 100)",
    )
    p_serialize.add_argument(
        "--attribute",
        default=DEFAULT_CONFIG.attribute,
        metavar="NAME",
        help='Set the attribute used in dependencies (default: "Name")',
    )
    p_serialize.add_argument(
        "--function-dir",
        default=None,
        metavar="PATH",
        help=f"Function template root (default: <config dir>/{DEFAULT_CONFIG.function_dir})",
    )
    p_serialize.add_argument(
        "--dry-run", action="store_true",
        help="Compute and report, but write neither config nor templates",
    )
    p_serialize.add_argument(
        "--skip-templates", action="store_true",
        help="Write the config but leave templates untouched",
    )
    p_serialize.add_argument(
        "--mark-every-source", action="store_true",
        help="Record every source function as used, not only the first",
    )
    p_serialize.add_argument(
        "--summary-csv", default=None, metavar="PATH",
        help="Export the per-function summary table as CSV",
    )
    p_serialize.set_defaults(func=cmd_serialize)

    # check
    p_check = subparsers.add_parser(
        "check",
        help="Validate the config (cycles, metrics) without writing it",
    )
    p_check.add_argument(
        "--serialization",
        type=_percentage,
        default=DEFAULT_CONFIG.serialization_percentage,
        metavar="PERCENT",
        help="Target percentage used for the metrics report (default: 100)",
    )
    p_check.add_argument(
        "--summary-csv", default=None, metavar="PATH",
        help="Export the per-function summary table as CSV",
    )
    p_check.set_defaults(func=cmd_check)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
