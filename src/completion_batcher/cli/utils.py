# -*- coding: utf-8 -*-

import json
import logging

import click

from ..core.errors import InvalidArgumentError
from ..core.utils.clients import ClientConfig
from ..core.utils.environment import validate_required_env_vars


def setup_logging(verbose=False, quiet=False):
    """Configure logging for CLI execution."""
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    # Configure root logger
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True  # Override any existing configuration
    )

    # Reduce noise from external libraries in non-verbose mode
    if not verbose:
        logging.getLogger("urllib3").setLevel(logging.WARNING)
        logging.getLogger("openai").setLevel(logging.WARNING)
        logging.getLogger("httpx").setLevel(logging.WARNING)

    if verbose:
        logger = logging.getLogger(__name__)
        logger.debug("CLI logging setup completed")


def _validate_positive_integer_callback(ctx, param, value):
    """Validate that the provided value is a positive integer."""
    if value is not None and value <= 0:
        raise click.BadParameter("Value must be a positive integer.")
    return value


def _parse_key_value_callback(ctx, param, values):
    """
    Turn repeated `key=value` options into a dict.
    Values are parsed as JSON when possible and kept as strings otherwise.
    """
    parsed = {}
    for item in values:
        if '=' not in item:
            raise click.BadParameter(f"Expected key=value, got '{item}'.")
        key, raw = item.split('=', 1)
        if not key:
            raise click.BadParameter(f"Empty key in '{item}'.")
        try:
            parsed[key] = json.loads(raw)
        except json.JSONDecodeError:
            parsed[key] = raw
    return parsed


def _get_client_config(ctx):
    """Build the client configuration from the environment, exiting if credentials are missing."""
    azure = ctx.obj.get('azure', False)
    missing = validate_required_env_vars(azure=azure)
    if missing:
        logging.error(f"Missing required environment variables: {missing}")
        logging.info("Please set these environment variables or create a .env file in the "
                     "current directory with:")
        for var in missing:
            logging.info(f"  {var}=your_key_here")
        raise SystemExit(1)
    return ClientConfig.from_env(azure=azure)


def _get_llm_kwargs(ctx):
    """Keyword arguments giving an LLM its way to reach the provider."""
    if ctx.obj.get('transport') is not None:
        return {'transport': ctx.obj['transport']}
    try:
        return {'client_config': _get_client_config(ctx)}
    except InvalidArgumentError as e:
        logging.error(f"Error creating client configuration: {e}")
        raise SystemExit(1)
