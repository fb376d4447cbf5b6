"""Command-line entry point."""
import sys
import random
import argparse

from .analysis.charts import format_millions
from .config.manager import ConfigManager
from .config.settings import get_settings
from .gemini.reporter import is_error_report
from .geo.resolver import CoordinateResolver
from .orchestrator.dashboard import Dashboard
from .utils.logger import configure_logging, get_logger

logger = get_logger()


def _build_dashboard(args: argparse.Namespace) -> Dashboard:
    """Create the dashboard and load the requested dataset."""
    settings = get_settings()
    config = ConfigManager(settings).load_config()
    configure_logging(config.log_level, settings.log_max_file_size_mb, settings.log_backup_count)
    rng = random.Random(args.seed) if args.seed is not None else None
    resolver = CoordinateResolver(rng=rng, jitter=settings.resolver_jitter)
    dashboard = Dashboard(config=config, resolver=resolver)

    result = dashboard.load_file(args.dataset)
    if not result.is_valid:
        print(f"✗ {result.error}")
        sys.exit(1)

    dashboard.set_filters(
        municipality=args.municipality,
        category=args.category,
        type=args.type,
        start=args.start,
        end=args.end
    )
    return dashboard


def summary_command(args: argparse.Namespace) -> None:
    """Print headline metrics and the per-municipality table."""
    dashboard = _build_dashboard(args)
    metrics = dashboard.metrics()

    print(f"\nTransacciones:  {metrics.transaction_count}")
    print(f"Volumen total:  {format_millions(metrics.total_volume, 1)}")
    print(f"Monto promedio: {format_millions(metrics.average_amount)}")
    print(f"Zona activa:    {metrics.top_zone}")

    rows = dashboard.volume_by_municipality()
    if not rows:
        return

    print(f"\n{'Municipio':<30} {'Transacciones':>14}")
    print("-" * 45)
    for row in rows:
        print(f"{row['name']:<30} {row['transactions']:>14}")


def export_command(args: argparse.Namespace) -> None:
    """Write the filtered subset to disk."""
    dashboard = _build_dashboard(args)
    path = dashboard.export(args.format, args.output_dir)
    print(f"✓ Exported {len(dashboard.filtered)} transactions to {path}")


def report_command(args: argparse.Namespace) -> None:
    """Request and print the Gemini narrative report."""
    dashboard = _build_dashboard(args)

    is_valid, message = ConfigManager().validate_config(dashboard.config)
    if not is_valid:
        logger.warning(f"Invalid configuration: {message}")

    report = dashboard.run_analysis()
    if report is None:
        print("No transactions match the current filters.")
        sys.exit(1)

    print(report)
    if is_error_report(report):
        sys.exit(1)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("dataset", help="CSV or JSON dataset file")
    parser.add_argument("--municipality", help="Exact municipality name")
    parser.add_argument("--category", help="Residencial, Terreno, Industrial, Comercial or Otros")
    parser.add_argument("--type", help="Exact property type")
    parser.add_argument("--start", help="First date included (YYYY-MM-DD)")
    parser.add_argument("--end", help="Last date included (YYYY-MM-DD)")
    parser.add_argument("--seed", type=int, help="Seed for coordinate jitter")


def main(argv=None):
    """Main entry point for the RPEE command-line tool."""
    parser = argparse.ArgumentParser(description="RPEE real-estate transaction dashboard")
    subparsers = parser.add_subparsers(dest="command", required=True)

    summary_parser = subparsers.add_parser("summary", help="Show dashboard metrics")
    _add_common_arguments(summary_parser)
    summary_parser.set_defaults(handler=summary_command)

    export_parser = subparsers.add_parser("export", help="Export filtered transactions")
    _add_common_arguments(export_parser)
    export_parser.add_argument("--format", choices=["csv", "json"], default="csv")
    export_parser.add_argument("--output-dir", help="Directory for the export file")
    export_parser.set_defaults(handler=export_command)

    report_parser = subparsers.add_parser("report", help="Generate the AI narrative report")
    _add_common_arguments(report_parser)
    report_parser.set_defaults(handler=report_command)

    args = parser.parse_args(argv)

    try:
        args.handler(args)
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt")
    except Exception as e:
        logger.critical(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
