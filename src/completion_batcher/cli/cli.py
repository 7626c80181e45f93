# -*- coding: utf-8 -*-

import json
import logging
from pathlib import Path

import click
import yaml

from ..core.chains.base import load_chain
from ..core.errors import CompletionBatcherError
from ..core.generation.engine import DEFAULT_BATCH_SIZE, DEFAULT_MODEL_NAME, OpenAICompletions
from ..core.generation.retry import DEFAULT_MAX_ATTEMPTS
from ..core.utils.datasource import read_documents, read_prompts
from ..core.utils.misc import ensure_output_path, mask_path, write_json, write_jsonl
from .utils import (
    setup_logging,
    _validate_positive_integer_callback,
    _parse_key_value_callback,
    _get_llm_kwargs,
)


@click.group()
@click.option(
    '-v', '--verbose', is_flag=True,
    help='Enable verbose (DEBUG) logging'
)
@click.option(
    '-q', '--quiet', is_flag=True,
    help='Only show warnings and errors'
)
@click.option(
    '--azure/--no-azure', default=False,
    help='Use Azure OpenAI API instead of OpenAI API.'
)
@click.pass_context
def cli(ctx, verbose, quiet, azure):
    """
    Completion Batcher CLI - send prompts to OpenAI completion models in
    batches and run document stuffing chains saved as JSON or YAML.

    \b
    Ensure you have the appropriate API keys set in your environment variables:
    - OPENAI_API_KEY (for OpenAI)
    - AZURE_OPENAI_API_KEY, AZURE_OPENAI_ENDPOINT (for Azure OpenAI)
    """
    setup_logging(verbose=verbose, quiet=quiet)

    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    ctx.obj['azure'] = azure


@cli.command()
@click.argument('prompts_file', type=click.Path(exists=True, dir_okay=False))
@click.option(
    '-o', '--output', type=click.Path(dir_okay=False), required=True,
    help='JSONL file to write, one line per prompt with its completions.'
)
@click.option(
    '--prompt-key', default='prompt', show_default=True,
    help='Key (JSONL) or column (CSV/Parquet) holding the prompt text.'
)
@click.option('-m', '--model', default=DEFAULT_MODEL_NAME, show_default=True, help='Completion model name.')
@click.option(
    '--batch-size', type=int, default=DEFAULT_BATCH_SIZE, show_default=True,
    callback=_validate_positive_integer_callback,
    help='Number of prompts sent per request.'
)
@click.option(
    '-n', 'n', type=int, default=1, show_default=True,
    callback=_validate_positive_integer_callback,
    help='Number of completions per prompt.'
)
@click.option(
    '--max-tokens', type=int, default=256, show_default=True,
    help='Maximum number of tokens per completion.'
)
@click.option('--temperature', type=float, default=0.7, show_default=True, help='Sampling temperature.')
@click.option(
    '--max-retries', type=int, default=DEFAULT_MAX_ATTEMPTS, show_default=True,
    callback=_validate_positive_integer_callback,
    help='Maximum number of attempts per batch.'
)
@click.option('--stop', multiple=True, help='Stop sequence. Repeat for several.')
@click.option('--timeout', type=float, default=None, help='Overall time budget in seconds.')
@click.pass_context
def generate(ctx, prompts_file, output, prompt_key, model, batch_size, n,
             max_tokens, temperature, max_retries, stop, timeout):
    """
    Generate completions for every prompt in PROMPTS_FILE.

    \b
    PROMPTS_FILE:
      JSONL, CSV, Parquet or TXT (one prompt per line) file with the prompts.
    """
    try:
        prompts = read_prompts(prompts_file, key=prompt_key)
    except Exception as e:
        logging.error(f"Error reading prompts from '{mask_path(prompts_file)}': {e}")
        raise SystemExit(1)
    logging.info(f"Read {len(prompts)} prompts from {mask_path(prompts_file)}")

    llm = OpenAICompletions(
        model_name=model,
        temperature=temperature,
        max_tokens=max_tokens,
        n=n,
        batch_size=batch_size,
        max_retries=max_retries,
        show_progress=not ctx.obj['verbose'],
        **_get_llm_kwargs(ctx)
    )

    try:
        result = llm.generate(prompts, stop=list(stop) or None, timeout=timeout)
    except CompletionBatcherError as e:
        logging.error(f"Generation failed: {e}")
        raise SystemExit(1)

    ensure_output_path(Path(output).resolve().parent)
    lines = [
        {'prompt': prompt, 'generations': [c.to_dict() for c in group]}
        for prompt, group in zip(prompts, result.generations)
    ]
    write_jsonl(lines, output)
    logging.info(f"Wrote {len(lines)} results to {mask_path(output)}")
    logging.info(f"Token usage: {result.token_usage.to_dict()}")


@cli.command()
@click.argument('chain_config', type=click.Path(exists=True, dir_okay=False))
@click.argument('documents_file', type=click.Path(exists=True, dir_okay=False))
@click.option(
    '-i', '--input', 'extra_inputs', multiple=True,
    callback=_parse_key_value_callback,
    help='Additional chain input as key=value. Repeat for several.'
)
@click.option(
    '--content-key', default='page_content', show_default=True,
    help='Key (JSONL) or column (CSV/Parquet) holding the document text.'
)
@click.option(
    '-o', '--output', type=click.Path(dir_okay=False), default=None,
    help='JSON file to write the chain outputs to. Printed if omitted.'
)
@click.pass_context
def stuff(ctx, chain_config, documents_file, extra_inputs, content_key, output):
    """
    Run the chain saved in CHAIN_CONFIG over the documents in DOCUMENTS_FILE.

    \b
    CHAIN_CONFIG:
      JSON or YAML file produced by `chain.save(...)`. Nested configurations
      may be inline or referenced with `<key>_path` entries.
    """
    try:
        documents = read_documents(documents_file, content_key=content_key)
    except Exception as e:
        logging.error(f"Error reading documents from '{mask_path(documents_file)}': {e}")
        raise SystemExit(1)
    logging.info(f"Read {len(documents)} documents from {mask_path(documents_file)}")

    try:
        chain = load_chain(chain_config, **_get_llm_kwargs(ctx))
        document_key = getattr(chain, 'input_key', 'input_documents')
        outputs = chain.run({**extra_inputs, document_key: documents})
    except CompletionBatcherError as e:
        logging.error(f"Chain run failed: {e}")
        raise SystemExit(1)

    if output is None:
        click.echo(json.dumps(outputs, indent=2))
    else:
        write_json(outputs, output)
        logging.info(f"Saved chain outputs to {mask_path(output)}")


@cli.command()
@click.argument('chain_config', type=click.Path(exists=True, dir_okay=False))
def show_config(chain_config):
    """Print CHAIN_CONFIG as YAML with every file reference resolved inline."""
    try:
        chain = load_chain(chain_config)
    except CompletionBatcherError as e:
        logging.error(f"Could not load chain from {mask_path(chain_config)}: {e}")
        raise SystemExit(1)
    click.echo(yaml.safe_dump(chain.serialize(), default_flow_style=False, sort_keys=False))
