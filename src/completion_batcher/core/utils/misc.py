# -*- coding: utf-8 -*-

import os
import json
import logging
from pathlib import Path

import yaml


#=======================================================================
# JSON Lines Utilities
#=======================================================================

def write_jsonl(lines, path):
    """
    Write a list of dictionaries to a JSON Lines file.
    Each dictionary is written as a separate line in the file.

    Args:
        lines (list): List of dictionaries to write.
        path (str): Path to the output file.
    """
    with open(path, 'w', encoding='utf-8') as f:
        for line in lines:
            f.write(json.dumps(line) + '\n')
    return


def read_jsonl(path):
    """
    Read a JSON Lines file and return a list of dictionaries.
    Blank lines are skipped.

    Args:
        path (str): Path to the input file.

    Returns:
        list: List of dictionaries read from the file.
    """
    with open(path, 'r', encoding='utf-8') as f:
        return [json.loads(line) for line in f if line.strip()]


#=======================================================================
# JSON / YAML Utilities
#=======================================================================

def read_json(path, encoding="utf-8"):
    with open(path, 'r', encoding=encoding) as f:
        return json.load(f)


def write_json(data, path, indent=4, encoding="utf-8"):
    with open(path, 'w', encoding=encoding) as f:
        json.dump(data, f, indent=indent)


def read_yaml(path, encoding="utf-8"):
    with open(path, 'r', encoding=encoding) as f:
        return yaml.safe_load(f)


def write_yaml(data, path, encoding="utf-8"):
    with open(path, 'w', encoding=encoding) as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)


#=======================================================================
# Path Utilities
#=======================================================================

def mask_path(path, base_dir=None):
    """
    Masks or simplifies a path for logging.

    Args:
        path (str): The full path to mask.
        base_dir (str, optional): The base directory to make the path relative to.

    Returns:
        str: The masked or simplified path.
    """
    path = Path(path)

    # Use base_dir if provided, otherwise fallback to PROJECT_DIR from environment
    if base_dir is None:
        base_dir = os.getenv('PROJECT_DIR')

    if base_dir:
        base_dir = Path(base_dir)
        try:
            return str(path.relative_to(base_dir))
        except ValueError:
            pass  # Not under base_dir

    # Replace home directory with "~"
    if str(path).startswith(str(Path.home())):
        return f"~/{path.relative_to(Path.home())}"
    return str(path)


def ensure_output_path(path, description="Output folder"):
    """Create an output directory if it does not exist yet."""
    if not os.path.exists(path):
        logging.info(f"{description} does not exist. Creating it at: {mask_path(path)}")
        os.makedirs(path, exist_ok=True)
