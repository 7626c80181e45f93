# -*- coding: utf-8 -*-

from dataclasses import dataclass, field
from typing import Any, Dict

from .errors import InvalidArgumentError


@dataclass
class Document:
    """A piece of text plus arbitrary metadata."""
    page_content: str
    metadata: Dict[str, Any] = field(default_factory=dict)


def get_page_content(doc) -> str:
    """
    Text of a document.

    Accepts Document instances, any object with a `page_content` attribute,
    and mappings with a 'page_content' or 'pageContent' key.
    """
    if isinstance(doc, dict):
        for key in ('page_content', 'pageContent'):
            if key in doc:
                return doc[key]
        raise InvalidArgumentError(f"Document mapping has no 'page_content' key: {sorted(doc)}")
    if hasattr(doc, 'page_content'):
        return doc.page_content
    raise InvalidArgumentError(f"Object of type {type(doc).__name__} is not a document.")
