from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from conftest import FakeTransport

from completion_batcher.cli import cli
from completion_batcher.core.chains.llm_chain import LLMChain
from completion_batcher.core.chains.prompt import PromptTemplate
from completion_batcher.core.chains.stuff_documents import StuffDocumentsChain
from completion_batcher.core.generation.engine import OpenAICompletions


def _write_jsonl(path: Path, rows: list[dict]) -> None:
    path.write_text("".join(json.dumps(row) + "\n" for row in rows))


def _save_stuff_chain(tmp_path: Path) -> Path:
    llm_chain = LLMChain(llm=OpenAICompletions(), prompt=PromptTemplate("{question}: {context}"))
    llm_chain.save(tmp_path / "llm_chain.yaml")
    config = tmp_path / "stuff.yaml"
    config.write_text("_type: stuff_documents_chain\nllm_chain_path: llm_chain.yaml\n")
    return config


def test_generate_writes_one_line_per_prompt(tmp_path: Path) -> None:
    _write_jsonl(tmp_path / "prompts.jsonl", [{"prompt": f"p{i}"} for i in range(5)])
    transport = FakeTransport()

    result = CliRunner().invoke(
        cli,
        ["-q", "generate", str(tmp_path / "prompts.jsonl"), "-o", str(tmp_path / "out" / "completions.jsonl"),
         "--batch-size", "2", "-n", "2", "--stop", "END"],
        obj={"transport": transport},
    )

    assert result.exit_code == 0, result.output
    lines = [json.loads(line) for line in (tmp_path / "out" / "completions.jsonl").read_text().splitlines()]
    assert [line["prompt"] for line in lines] == [f"p{i}" for i in range(5)]
    assert [g["text"] for g in lines[3]["generations"]] == ["p3#0", "p3#1"]
    assert len(transport.requests) == 3
    assert transport.requests[0]["stop"] == ["END"]


def test_generate_reports_exhausted_retries(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _write_jsonl(tmp_path / "prompts.jsonl", [{"prompt": "a"}])
    transport = FakeTransport(fail_times=100)
    monkeypatch.setattr("time.sleep", lambda seconds: None)

    result = CliRunner().invoke(
        cli,
        ["-q", "generate", str(tmp_path / "prompts.jsonl"), "-o", str(tmp_path / "out.jsonl"), "--max-retries", "2"],
        obj={"transport": transport},
    )

    assert result.exit_code == 1
    assert transport.calls == 2
    assert not (tmp_path / "out.jsonl").exists()


def test_generate_requires_credentials_without_transport(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    _write_jsonl(tmp_path / "prompts.jsonl", [{"prompt": "a"}])

    result = CliRunner().invoke(cli, ["-q", "generate", str(tmp_path / "prompts.jsonl"), "-o", str(tmp_path / "o.jsonl")])

    assert result.exit_code == 1


def test_stuff_runs_saved_chain(tmp_path: Path) -> None:
    config = _save_stuff_chain(tmp_path)
    _write_jsonl(tmp_path / "docs.jsonl", [{"page_content": "A"}, {"page_content": "B"}])
    transport = FakeTransport()

    result = CliRunner().invoke(
        cli,
        ["-q", "stuff", str(config), str(tmp_path / "docs.jsonl"), "-i", "question=Why", "-o", str(tmp_path / "out.json")],
        obj={"transport": transport},
    )

    assert result.exit_code == 0, result.output
    assert json.loads((tmp_path / "out.json").read_text()) == {"text": "Why: A\n\nB#0"}


def test_stuff_with_missing_chain_input_fails(tmp_path: Path) -> None:
    config = _save_stuff_chain(tmp_path)
    _write_jsonl(tmp_path / "docs.jsonl", [{"page_content": "A"}])

    result = CliRunner().invoke(
        cli, ["-q", "stuff", str(config), str(tmp_path / "docs.jsonl")], obj={"transport": FakeTransport()})

    assert result.exit_code == 1


def test_show_config_resolves_references(tmp_path: Path) -> None:
    config = _save_stuff_chain(tmp_path)

    result = CliRunner().invoke(cli, ["-q", "show-config", str(config)])

    assert result.exit_code == 0, result.output
    assert "llm_chain:" in result.output
    assert "llm_chain_path" not in result.output
    assert "_type: openai" in result.output


def test_show_config_bad_reference(tmp_path: Path) -> None:
    config = tmp_path / "stuff.yaml"
    config.write_text("_type: stuff_documents_chain\nllm_chain_path: missing.yaml\n")

    result = CliRunner().invoke(cli, ["-q", "show-config", str(config)])

    assert result.exit_code == 1


def test_key_value_inputs_must_contain_equals(tmp_path: Path) -> None:
    config = _save_stuff_chain(tmp_path)
    _write_jsonl(tmp_path / "docs.jsonl", [{"page_content": "A"}])

    result = CliRunner().invoke(
        cli, ["stuff", str(config), str(tmp_path / "docs.jsonl"), "-i", "novalue"], obj={"transport": FakeTransport()})

    assert result.exit_code == 2


def test_generate_with_missing_prompt_column_fails_cleanly(tmp_path: Path) -> None:
    _write_jsonl(tmp_path / "prompts.jsonl", [{"text": "a"}])
    transport = FakeTransport()

    result = CliRunner().invoke(
        cli,
        ["-q", "generate", str(tmp_path / "prompts.jsonl"), "-o", str(tmp_path / "out.jsonl")],
        obj={"transport": transport},
    )

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert transport.calls == 0


def test_stuff_with_missing_content_column_fails_cleanly(tmp_path: Path) -> None:
    config = _save_stuff_chain(tmp_path)
    _write_jsonl(tmp_path / "docs.jsonl", [{"body": "A"}])

    result = CliRunner().invoke(
        cli,
        ["-q", "stuff", str(config), str(tmp_path / "docs.jsonl"), "-i", "question=Why"],
        obj={"transport": FakeTransport()},
    )

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
