from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from src.config.configure_app import reset_rag_service
from src.interface.cli import app

runner = CliRunner()


@pytest.fixture
def corpus_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    path = tmp_path / "corpus.json"
    path.write_text(
        json.dumps(
            {
                "corpora": [
                    {
                        "id": "kb",
                        "title": "Knowledge base",
                        "documents": [
                            {
                                "id": "plan",
                                "title": "Project plan",
                                "keywords": ["project", "plan"],
                                "content": "Milestones and owners.",
                            },
                            {
                                "id": "food",
                                "title": "Lunch menu",
                                "keywords": ["lunch", "menu"],
                                "content": "Soup.",
                            },
                        ],
                    }
                ]
            }
        ),
        encoding="utf-8",
    )
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("RAG_CORPUS_FILE", str(path))
    monkeypatch.setenv("RAG_PACING_DELAY_MS", "0")
    monkeypatch.setenv("LLM_PROVIDER", "dummy")
    reset_rag_service()
    yield path
    reset_rag_service()


def test_relevance_json(corpus_file: Path) -> None:
    result = runner.invoke(app, ["relevance", "project plan", "--corpus", "kb", "--json"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert [p["id"] for p in payload] == ["plan"]
    assert payload[0]["score"] == 1.0


def test_relevance_text_no_match(corpus_file: Path) -> None:
    result = runner.invoke(app, ["relevance", "quantum physics", "--corpus", "kb"])
    assert result.exit_code == 0
    assert "No relevant documents." in result.output


def test_ask_prints_answer_and_sources(corpus_file: Path) -> None:
    result = runner.invoke(app, ["ask", "project plan", "--corpus", "kb"])
    assert result.exit_code == 0, result.output
    # the offline model echoes its prompt
    assert "Milestones and owners." in result.output
    assert "Sources:" in result.output and "[1] Project plan" in result.output


def test_append_to_target_persists(corpus_file: Path) -> None:
    result = runner.invoke(app, ["append", "new note", "--corpus", "kb", "--target", "food"])
    assert result.exit_code == 0, result.output
    out = json.loads(result.output)
    assert out["action"] == "merged_target" and out["document_id"] == "food"

    stored = json.loads(corpus_file.read_text(encoding="utf-8"))
    food = next(d for d in stored["corpora"][0]["documents"] if d["id"] == "food")
    assert "new note" in food["content"]


def test_append_without_match_creates(corpus_file: Path) -> None:
    result = runner.invoke(app, ["append", "zebra migration", "--corpus", "kb"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["action"] == "created"
    stored = json.loads(corpus_file.read_text(encoding="utf-8"))
    assert len(stored["corpora"][0]["documents"]) == 3


def test_unknown_corpus_fails(corpus_file: Path) -> None:
    result = runner.invoke(app, ["relevance", "x", "--corpus", "missing"])
    assert result.exit_code != 0
