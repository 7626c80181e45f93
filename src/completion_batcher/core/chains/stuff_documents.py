# -*- coding: utf-8 -*-
"""
Chain that combines documents by stuffing them into a single context.
"""

import logging
from typing import List

from .base import BaseChain, ChainValues, load_chain_from_config, register_chain
from ..documents import get_page_content
from ..errors import ConfigResolutionError
from ..utils.config_resolution import resolve_config_from_file

DOCUMENT_SEPARATOR = "\n\n"


@register_chain("stuff_documents_chain")
class StuffDocumentsChain(BaseChain):
    """
    Joins the text of a list of documents and hands it to an inner chain.

    Args:
        llm_chain (BaseChain): Inner chain receiving the joined text and the
            remaining inputs.
        input_key (str): Input key holding the list of documents.
        output_key (str): Output key advertised for the combined result.
        document_variable_name (str): Key under which the joined text is
            passed to the inner chain.
    """

    def __init__(
        self,
        llm_chain: BaseChain,
        input_key: str = "input_documents",
        output_key: str = "output_text",
        document_variable_name: str = "context",
    ):
        self.llm_chain = llm_chain
        self.input_key = input_key
        self.output_key = output_key
        self.document_variable_name = document_variable_name

    @property
    def input_keys(self) -> List[str]:
        return [self.input_key]

    @property
    def output_keys(self) -> List[str]:
        return list(self.llm_chain.output_keys)

    def _chain_type(self) -> str:
        return "stuff_documents_chain"

    def _call(self, inputs: ChainValues) -> ChainValues:
        docs = inputs.pop(self.input_key)
        text = DOCUMENT_SEPARATOR.join(get_page_content(doc) for doc in docs)
        logging.debug(f"Stuffed {len(docs)} document(s) into '{self.document_variable_name}' "
                      f"({len(text)} characters)")
        return self.llm_chain.run({**inputs, self.document_variable_name: text})

    def serialize(self) -> dict:
        return {
            "_type": self._chain_type(),
            "llm_chain": self.llm_chain.serialize(),
            "input_key": self.input_key,
            "output_key": self.output_key,
            "document_variable_name": self.document_variable_name,
        }

    @classmethod
    def deserialize(cls, data: dict, loader=None, **kwargs) -> "StuffDocumentsChain":
        """
        Rebuild the chain from `serialize()` output.

        The inner chain is given either inline under `llm_chain` or as a file
        reference under `llm_chain_path`, never both.

        Raises:
            ConfigResolutionError: If neither or both forms are given, or the
                referenced file cannot be read.
        """
        llm_chain_config = resolve_config_from_file("llm_chain", data, loader=loader)
        if not isinstance(llm_chain_config, dict):
            raise ConfigResolutionError("The `llm_chain` configuration must be a mapping.")

        llm_chain = load_chain_from_config(llm_chain_config, loader=loader, **kwargs)
        return cls(
            llm_chain=llm_chain,
            input_key=data.get("input_key", "input_documents"),
            output_key=data.get("output_key", "output_text"),
            document_variable_name=data.get("document_variable_name", "context"),
        )
