"""
Shared utilities for scripts.

Provides common boilerplate: argument parsing, config loading, logging setup.
"""
import argparse
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from core.config import AppConfig
from core.services.diagnostics import configure_logging


def create_base_parser(description: str) -> argparse.ArgumentParser:
    """Create argument parser with common --config and --log-level flags.

    Args:
        description: Script description for help text.

    Returns:
        ArgumentParser with the common flags already added.
    """
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument(
        '--config',
        default=None,
        help='YAML file overriding environment configuration'
    )
    parser.add_argument(
        '--log-level',
        default=None,
        help='Logging level (default: LOG_LEVEL or INFO)'
    )
    return parser


def load_app_config(args: argparse.Namespace) -> AppConfig:
    """Load configuration and set up logging for a script run.

    Args:
        args: Parsed arguments from a create_base_parser() parser.

    Returns:
        Loaded AppConfig.

    Raises:
        SystemExit: With status 2 if the configuration cannot be loaded.
    """
    try:
        config = AppConfig.load(args.config)
    except (OSError, ValueError) as e:
        print(f"Error: Could not load configuration: {e}")
        sys.exit(2)

    configure_logging(args.log_level or config.logging.level, config.logging.format)
    return config
