# -*- coding: utf-8 -*-

import logging
from typing import List

from .base import BaseChain, ChainValues, register_chain
from .prompt import PromptTemplate
from ..errors import ConfigResolutionError
from ..generation.engine import load_llm_from_config
from ..utils.config_resolution import resolve_config_from_file


@register_chain("llm_chain")
class LLMChain(BaseChain):
    """
    Chain that formats a prompt from its inputs and completes it with an LLM.

    Args:
        llm: Completion model exposing `generate(prompts, stop=None)`,
            e.g. OpenAICompletions.
        prompt (PromptTemplate): Template filled from the chain inputs.
        output_key (str): Key under which the completion text is returned.

    An optional 'stop' input overrides the model's stop sequences for the call.
    """

    def __init__(self, llm, prompt: PromptTemplate, output_key: str = "text"):
        self.llm = llm
        self.prompt = prompt
        self.output_key = output_key

    @property
    def input_keys(self) -> List[str]:
        return list(self.prompt.input_variables)

    @property
    def output_keys(self) -> List[str]:
        return [self.output_key]

    def _chain_type(self) -> str:
        return "llm_chain"

    def _call(self, inputs: ChainValues) -> ChainValues:
        return self.apply([inputs])[0]

    def apply(self, input_list: List[ChainValues]) -> List[ChainValues]:
        """
        Run the chain over many inputs with a single `generate` call.

        The model batches the formatted prompts itself. All inputs must share
        the same 'stop' value, if any.
        """
        if not input_list:
            return []
        for inputs in input_list:
            self._validate_inputs(inputs)
        prompts = [self.prompt.format(**inputs) for inputs in input_list]
        stop = input_list[0].get("stop")

        logging.debug(f"Formatted {len(prompts)} prompt(s) for {self._chain_type()}")
        result = self.llm.generate(prompts, stop=stop)
        return [{self.output_key: group[0].text} for group in result.generations]

    def predict(self, **kwargs) -> str:
        """Run the chain on keyword inputs and return the completion text."""
        return self.run(kwargs)[self.output_key]

    def serialize(self) -> dict:
        return {
            "_type": self._chain_type(),
            "llm": self.llm.serialize(),
            "prompt": self.prompt.serialize(),
            "output_key": self.output_key,
        }

    @classmethod
    def deserialize(cls, data: dict, loader=None, **kwargs) -> "LLMChain":
        """
        Rebuild an LLMChain. `llm`/`llm_path` and `prompt`/`prompt_path` may
        each be inline or a file reference. Extra keyword arguments (e.g.
        transport, client_config) are passed to the LLM.
        """
        llm_config = resolve_config_from_file("llm", data, loader=loader)
        prompt_config = resolve_config_from_file("prompt", data, loader=loader)
        if not isinstance(llm_config, dict):
            raise ConfigResolutionError("The `llm` configuration must be a mapping.")

        llm = load_llm_from_config(llm_config, loader=loader, **kwargs)
        prompt = PromptTemplate.deserialize(prompt_config, loader=loader)
        return cls(llm=llm, prompt=prompt, output_key=data.get("output_key", "text"))
