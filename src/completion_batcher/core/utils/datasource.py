# -*- coding: utf-8 -*-

import polars as pl
from pathlib import Path

from .misc import read_jsonl
from ..documents import Document


def _read_tabular(source_file):
    source_file = Path(source_file)
    if source_file.suffix == '.csv':
        return pl.read_csv(source_file)
    if source_file.suffix == '.parquet':
        return pl.read_parquet(source_file)
    raise ValueError("Source data file must be a CSV or PARQUET file.")


def read_prompts_jsonl(source_file, key='prompt'):
    """Read prompts from a JSONL file, one object with a `key` field per line."""
    lines = read_jsonl(source_file)
    prompts = []
    for i, item in enumerate(lines):
        if key not in item:
            raise KeyError(f"Expected '{key}' key not found in line {i} of {source_file}.")
        prompts.append(item[key])
    return prompts


def read_prompts_tabular(source_file, key='prompt'):
    """Read prompts from the `key` column of a CSV or PARQUET file."""
    df = _read_tabular(source_file)
    if key not in df.columns:
        raise KeyError(f"Expected '{key}' column not found in {source_file}.")
    return df[key].to_list()


def read_prompts(source_file, key='prompt'):
    """Read prompts from a JSONL, CSV or PARQUET file, or a plain .txt file with one prompt per line."""
    source_file = Path(source_file)
    if source_file.suffix == '.jsonl':
        return read_prompts_jsonl(source_file, key=key)
    if source_file.suffix in ['.csv', '.parquet']:
        return read_prompts_tabular(source_file, key=key)
    if source_file.suffix == '.txt':
        with open(source_file, 'r', encoding='utf-8') as f:
            return [line.rstrip('\n') for line in f if line.strip()]
    raise ValueError("Source data file must be a JSONL, CSV, PARQUET or TXT file.")


def read_documents(source_file, content_key='page_content'):
    """
    Read documents from a JSONL, CSV or PARQUET file.

    The `content_key` field (or column) holds the document text, every
    other field is kept as metadata.
    """
    source_file = Path(source_file)
    if source_file.suffix == '.jsonl':
        rows = read_jsonl(source_file)
    elif source_file.suffix in ['.csv', '.parquet']:
        rows = _read_tabular(source_file).to_dicts()
    else:
        raise ValueError("Documents file must be a JSONL, CSV or PARQUET file.")

    documents = []
    for i, row in enumerate(rows):
        if content_key not in row:
            raise KeyError(f"Expected '{content_key}' not found in row {i} of {source_file}.")
        metadata = {k: v for k, v in row.items() if k != content_key}
        documents.append(Document(page_content=row[content_key], metadata=metadata))
    return documents
