"""
CLI entry point for Completion Batcher.

Configures logging and loads .env files before running the CLI.
"""

import sys
import logging


def __setup_main_logging(verbose=False, quiet=False):
    """Configure logging early so environment setup can log."""
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True
    )


def __setup_cli_environment(verbose=False):
    """Load .env files for CLI usage."""
    logger = logging.getLogger(__name__)

    from ..core.utils.environment import setup_environment
    setup_environment(verbose=verbose)

    if verbose:
        logger.debug("Environment setup completed successfully")


def main():
    """Main CLI entry point with full setup."""
    verbose = '-v' in sys.argv or '--verbose' in sys.argv
    quiet = '-q' in sys.argv or '--quiet' in sys.argv

    # 1. Configure logging FIRST
    __setup_main_logging(verbose=verbose, quiet=quiet)

    # 2. Load .env files (now logging is available)
    __setup_cli_environment(verbose=verbose)

    # 3. Import and run CLI
    logger = logging.getLogger(__name__)

    try:
        logger.debug("Starting CLI execution")
        from .cli import cli
        cli()

    except KeyboardInterrupt:
        logger.info("CLI interrupted by user")
        sys.exit(130)  # Standard exit code for SIGINT


if __name__ == '__main__':
    main()
