# -*- coding: utf-8 -*-

from typing import List, Sequence, TypeVar

from ..errors import InvalidArgumentError

T = TypeVar("T")


def chunk_list(items: Sequence[T], chunk_size: int) -> List[List[T]]:
    """
    Split a sequence into consecutive chunks of at most `chunk_size` items.

    Concatenating the returned chunks in order gives back the input. Every
    chunk holds exactly `chunk_size` items except possibly the last one.

    Args:
        items (Sequence): Ordered items to split.
        chunk_size (int): Maximum number of items per chunk.

    Returns:
        list[list]: The chunks, in input order. Empty input gives [].

    Raises:
        InvalidArgumentError: If chunk_size is not a positive integer.
    """
    if isinstance(chunk_size, bool) or not isinstance(chunk_size, int) or chunk_size <= 0:
        raise InvalidArgumentError(f"Chunk size must be a positive integer, got {chunk_size!r}.")
    items = list(items)
    return [items[i:i + chunk_size] for i in range(0, len(items), chunk_size)]
