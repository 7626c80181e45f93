# -*- coding: utf-8 -*-

import string
from typing import List, Optional

from ..errors import ConfigResolutionError, InvalidArgumentError, MissingInputError
from ..utils.config_resolution import resolve_config_from_file


def _template_variables(template: str) -> List[str]:
    variables = []
    for _, field_name, _, _ in string.Formatter().parse(template):
        if field_name is None:
            continue
        if field_name == "" or field_name.split(".")[0].split("[")[0].isdigit():
            # Placeholders must be named: "{}" and "{0}" cannot be filled by keyword.
            raise ValueError(f"positional placeholder '{{{field_name}}}' is not supported")
        if field_name not in variables:
            variables.append(field_name)
    return variables


class PromptTemplate:
    """
    A prompt with `{variable}` placeholders filled by `str.format`.

    Args:
        template (str): The template text.
        input_variables (list[str], optional): Variable names. Inferred from
            the template when omitted; must match it when given.
    """

    def __init__(self, template: str, input_variables: Optional[List[str]] = None):
        try:
            found = _template_variables(template)
        except ValueError as e:
            raise InvalidArgumentError(f"Invalid prompt template: {e}") from e
        if input_variables is None:
            input_variables = found
        elif set(input_variables) != set(found):
            raise InvalidArgumentError(
                f"input_variables {sorted(input_variables)} do not match the "
                f"template variables {sorted(found)}.")
        self.template = template
        self.input_variables = list(input_variables)

    def format(self, **kwargs) -> str:
        for name in self.input_variables:
            if name not in kwargs:
                raise MissingInputError(name, f"Missing value for prompt variable '{name}'.")
        return self.template.format(**{name: kwargs[name] for name in self.input_variables})

    def serialize(self) -> dict:
        return {
            "_type": "prompt",
            "input_variables": list(self.input_variables),
            "template": self.template,
        }

    @classmethod
    def deserialize(cls, data: dict, loader=None) -> "PromptTemplate":
        """Rebuild a template, reading `template_path` as plain text if given."""
        if not isinstance(data, dict):
            raise ConfigResolutionError("Prompt configuration must be a mapping.")
        if data.get("_type", "prompt") != "prompt":
            raise ConfigResolutionError(f"Loading {data['_type']} prompt not supported.")
        template = resolve_config_from_file("template", data, loader=loader, as_text=True)
        try:
            return cls(template=template, input_variables=data.get("input_variables"))
        except InvalidArgumentError as e:
            raise ConfigResolutionError(f"Invalid prompt configuration: {e}") from e
