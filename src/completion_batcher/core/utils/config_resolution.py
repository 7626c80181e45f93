# -*- coding: utf-8 -*-

"""
Resolution of nested configurations that may live in external files.

A serialized configuration can embed a sub-configuration inline under
`<key>` or point to a file holding it under `<key>_path`. Exactly one of
the two must be present.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

import yaml

from .misc import mask_path, read_json, read_yaml
from ..errors import ConfigResolutionError


SUFFIX_TO_READER = {
    '.json': read_json,
    '.yaml': read_yaml,
    '.yml': read_yaml,
}


@runtime_checkable
class ConfigLoader(Protocol):
    """Reads and parses the resource a `<key>_path` entry refers to."""

    def load(self, path) -> dict:
        ...

    def load_text(self, path) -> str:
        ...


class FileConfigLoader:
    """
    Loads JSON or YAML configuration files from the local file system.

    Args:
        base_dir (str | Path, optional): Directory that relative paths are
            resolved against. Defaults to the current working directory.
    """

    def __init__(self, base_dir=None):
        self.base_dir = Path(base_dir) if base_dir is not None else None

    def resolve_path(self, path) -> Path:
        path = Path(path).expanduser()
        if not path.is_absolute() and self.base_dir is not None:
            path = self.base_dir / path
        return path

    def load(self, path) -> dict:
        path = self.resolve_path(path)
        reader = SUFFIX_TO_READER.get(path.suffix.lower())
        if reader is None:
            raise ConfigResolutionError(
                f"Unsupported configuration file type '{path.suffix}' for {path}. "
                f"Expected one of {sorted(SUFFIX_TO_READER)}.")
        try:
            data = reader(path)
        except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigResolutionError(f"Could not read configuration from {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigResolutionError(f"Configuration in {path} must be a mapping, got {type(data).__name__}.")
        logging.debug(f"Loaded configuration from {mask_path(path)}")
        return data

    def load_text(self, path) -> str:
        path = self.resolve_path(path)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return f.read()
        except OSError as e:
            raise ConfigResolutionError(f"Could not read {path}: {e}") from e


def resolve_config_from_file(
        key: str,
        data: dict,
        loader: Optional[ConfigLoader] = None,
        as_text: bool = False
    ):
    """
    Return the sub-configuration stored under `key`, reading `<key>_path` if needed.

    Args:
        key (str): Name of the sub-configuration, e.g. 'llm_chain'.
        data (dict): The serialized configuration holding it.
        loader (ConfigLoader, optional): Used to read `<key>_path`.
            Defaults to FileConfigLoader().
        as_text (bool): Read the referenced file as plain text instead of
            parsing it as JSON or YAML.

    Raises:
        ConfigResolutionError: If both or neither of `key` and `<key>_path`
            are present, or the referenced resource cannot be read.
    """
    path_key = f"{key}_path"
    has_inline = key in data
    has_path = path_key in data

    if has_inline and has_path:
        raise ConfigResolutionError(f"Both `{key}` and `{path_key}` found in config, only one may be given.")
    if has_inline:
        return data[key]
    if has_path:
        loader = loader or FileConfigLoader()
        if as_text:
            return loader.load_text(data[path_key])
        return loader.load(data[path_key])
    raise ConfigResolutionError(f"Must specify either `{key}` or `{path_key}` in config.")
