# -*- coding: utf-8 -*-
"""
Base class and registry for pipeline chains.

A chain maps a dictionary of inputs to a dictionary of outputs and can be
serialized to a plain mapping tagged with its `_type`, from which it is
rebuilt by `load_chain_from_config`.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List

from ..errors import ConfigResolutionError, InvalidArgumentError, MissingInputError
from ..utils.config_resolution import FileConfigLoader
from ..utils.misc import mask_path, write_json, write_yaml

ChainValues = Dict[str, Any]

CHAIN_TYPE_TO_CLASS = {}


def register_chain(chain_type: str):
    """Class decorator making a chain loadable from configs tagged `chain_type`."""
    def decorator(cls):
        CHAIN_TYPE_TO_CLASS[chain_type] = cls
        return cls
    return decorator


class BaseChain(ABC):
    """Abstract pipeline component with a `run` step and a serialize/deserialize pair."""

    @property
    @abstractmethod
    def input_keys(self) -> List[str]:
        """Keys that must be present in the inputs of `run`."""

    @property
    @abstractmethod
    def output_keys(self) -> List[str]:
        """Keys present in the outputs of `run`."""

    @abstractmethod
    def _call(self, inputs: ChainValues) -> ChainValues:
        ...

    @abstractmethod
    def _chain_type(self) -> str:
        ...

    @abstractmethod
    def serialize(self) -> dict:
        ...

    @classmethod
    @abstractmethod
    def deserialize(cls, data: dict, **kwargs) -> "BaseChain":
        ...

    def _validate_inputs(self, inputs: ChainValues):
        for key in self.input_keys:
            if key not in inputs:
                raise MissingInputError(key)

    def run(self, inputs: ChainValues) -> ChainValues:
        """
        Run the chain on a mapping of inputs.

        Raises:
            MissingInputError: If one of `input_keys` is absent from inputs.
        """
        self._validate_inputs(inputs)
        logging.debug(f"Running {self._chain_type()} with inputs {sorted(inputs)}")
        return self._call(dict(inputs))

    def save(self, path):
        """Write the serialized chain to a .json, .yaml or .yml file."""
        path = Path(path)
        suffix = path.suffix.lower()
        if suffix == '.json':
            write_json(self.serialize(), path)
        elif suffix in ('.yaml', '.yml'):
            write_yaml(self.serialize(), path)
        else:
            raise InvalidArgumentError(f"Path must end with .json, .yaml or .yml, got {path}")
        logging.info(f"Saved {self._chain_type()} to {mask_path(path)}")


def load_chain_from_config(config: dict, **kwargs) -> BaseChain:
    """
    Rebuild a chain from its serialized configuration, dispatching on `_type`.

    Extra keyword arguments (loader, transport, client_config) are handed to
    the chain's `deserialize`.
    """
    if not isinstance(config, dict) or "_type" not in config:
        raise ConfigResolutionError("Chain configuration must be a mapping with a '_type' key.")
    chain_type = config["_type"]
    if chain_type not in CHAIN_TYPE_TO_CLASS:
        raise ConfigResolutionError(f"Loading {chain_type} chain not supported.")
    return CHAIN_TYPE_TO_CLASS[chain_type].deserialize(config, **kwargs)


def load_chain(path, **kwargs) -> BaseChain:
    """
    Load a chain from a JSON or YAML file.

    Relative `*_path` references inside the file are resolved against the
    file's directory unless a `loader` is given.
    """
    path = Path(path).resolve()
    loader = kwargs.pop('loader', None) or FileConfigLoader(base_dir=path.parent)
    config = loader.load(path)
    logging.info(f"Loading {config.get('_type')} from {mask_path(path)}")
    return load_chain_from_config(config, loader=loader, **kwargs)
