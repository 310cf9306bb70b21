"""Argument parsing, configuration loading, and the discovery run."""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import logging
import sys
from concurrent.futures import ThreadPoolExecutor

from . import __version__
from .config import AppConfig, load_config
from .coordinator import FanOutCoordinator
from .credentials import load_identities
from .discovery import InstanceProvider
from .discovery.aws_client import EC2Provider
from .discovery.models import Identity
from .exceptions import ConfigError, CredentialsError
from .logging_config import configure_logging
from .output import ReportPrinter
from .report import ReportAggregator

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fleet-discovery",
        description="List EC2 instance names and public IPs across every AWS profile and region",
    )
    parser.add_argument(
        "-r", "--region",
        metavar="REGION NAME",
        help="Filter to a specific region",
    )
    parser.add_argument(
        "-p", "--profile",
        metavar="PROFILE NAME",
        help="Filter to a specific profile",
    )
    parser.add_argument(
        "--raw",
        action="store_true",
        default=None,
        help="Show values without region/profile labels",
    )
    parser.add_argument(
        "-a", "--all",
        dest="include_addressless",
        action="store_true",
        default=None,
        help="Include instances without IPs",
    )
    parser.add_argument(
        "-c", "--config",
        help="Path to an optional YAML configuration file",
    )
    parser.add_argument(
        "--credentials-file",
        help="Path to the AWS shared credentials file (default: ~/.aws/credentials)",
    )
    parser.add_argument(
        "--log-level",
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    """Command-line flags win over configuration file values."""
    discovery = config.discovery
    if args.region:
        discovery = dataclasses.replace(discovery, region=args.region)
    if args.profile:
        discovery = dataclasses.replace(discovery, profile=args.profile)
    if args.include_addressless is not None:
        discovery = dataclasses.replace(discovery, include_addressless=args.include_addressless)

    output = config.output
    if args.raw is not None:
        output = dataclasses.replace(output, raw=args.raw)

    credentials = config.credentials
    if args.credentials_file:
        credentials = dataclasses.replace(credentials, path=args.credentials_file)

    logging_config = config.logging
    if args.log_level:
        logging_config = dataclasses.replace(logging_config, level=args.log_level)

    return dataclasses.replace(
        config,
        discovery=discovery,
        output=output,
        credentials=credentials,
        logging=logging_config,
    )


async def run_discovery(
    config: AppConfig,
    identities: list[Identity],
    provider: InstanceProvider,
    printer: ReportPrinter,
) -> ReportAggregator:
    """Stream every outcome through the aggregator to the printer as it is delivered."""
    aggregator = ReportAggregator()
    cap = config.discovery.max_workers
    executor = ThreadPoolExecutor(max_workers=cap) if cap else None
    try:
        coordinator = FanOutCoordinator(provider, config.discovery, executor=executor)
        async for item in coordinator.outcomes(identities):
            for event in aggregator.add(item):
                printer.emit(event)
    finally:
        if executor is not None:
            executor.shutdown(wait=False)
    return aggregator


def main(argv: list[str] | None = None, provider: InstanceProvider | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = apply_overrides(load_config(args.config), args)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    configure_logging(config.logging)

    # Fatal before any network activity
    try:
        identities = load_identities(config.credentials.path or None)
    except CredentialsError as exc:
        print(f"{exc}. Please check that it's correct.", file=sys.stderr)
        return 1

    printer = ReportPrinter(raw=config.output.raw, color=config.output.color)

    try:
        aggregator = asyncio.run(run_discovery(config, identities, provider or EC2Provider(), printer))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 0

    if aggregator.failures:
        logger.info("%d regions or profiles could not be queried", aggregator.failures)
    return 0
