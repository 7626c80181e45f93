# -*- coding: utf-8 -*-

"""
Environment configuration management for the CLI.
"""

import os
import logging
from pathlib import Path
from typing import Optional
import dotenv


def load_environment_variables(env_file: Optional[str] = None, verbose: bool = False) -> bool:
    """
    Load environment variables from a .env file.

    Args:
        env_file: Specific .env file path. If None, searches the current
            working directory for .env.local and .env.
        verbose: Whether to log environment loading details.

    Returns:
        True if a .env file was found and loaded, False otherwise.
    """
    if env_file:
        env_path = Path(env_file)
        if env_path.exists():
            dotenv.load_dotenv(env_path)
            if verbose:
                logging.debug(f"Loaded environment from: {env_path}")
            return True
        if verbose:
            logging.warning(f"Specified .env file not found: {env_path}")
        return False

    search_paths = [
        Path.cwd() / '.env.local',
        Path.cwd() / '.env',
    ]

    for env_path in search_paths:
        if env_path.exists():
            dotenv.load_dotenv(env_path)
            if verbose:
                logging.debug(f"Loaded environment from: {env_path}")
            return True

    if verbose:
        logging.debug("No .env file found in search paths")
    return False


def validate_required_env_vars(azure: bool = False) -> list:
    """
    Return the names of required environment variables that are not set.

    Args:
        azure: Check the Azure OpenAI variables instead of the OpenAI ones.
    """
    required = ['AZURE_OPENAI_API_KEY', 'AZURE_OPENAI_ENDPOINT'] if azure else ['OPENAI_API_KEY']
    return [var for var in required if not os.getenv(var)]


def setup_environment(verbose: bool = False, env_file: Optional[str] = None) -> bool:
    """
    Load .env files for the CLI. Environment files are optional.

    Returns:
        True if a .env file was loaded.
    """
    env_loaded = load_environment_variables(env_file, verbose)

    if verbose and not env_loaded:
        logging.debug("No .env file loaded. Relying on system environment variables.")
        logging.debug("Expected .env file locations:")
        logging.debug("  - ./.env.local (current directory)")
        logging.debug("  - ./.env (current directory)")

    return env_loaded
