"""
Tests for cli/main.py - the ``bible`` command line.

Runs every command against a local library in a temporary directory.
"""
import json

import pytest
from typer.testing import CliRunner

import config as config_module
from cli.main import app
from tests.support import OSIS_KJV, USFX_CORNILESCU

runner = CliRunner()


@pytest.fixture
def library(tmp_path, monkeypatch):
    (tmp_path / "kjv.xml").write_bytes(OSIS_KJV)
    (tmp_path / "ro-cornilescu.xml").write_bytes(USFX_CORNILESCU)

    monkeypatch.setenv("STORAGE_BACKEND", "local")
    monkeypatch.setenv("STORAGE_LOCAL_PATH", str(tmp_path))
    monkeypatch.setenv("STORAGE_PREFIX", "")
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    monkeypatch.setenv("OTEL_TRACING_ENABLED", "false")
    monkeypatch.setattr(config_module, "_config", None)
    return tmp_path


def invoke_json(*args):
    result = runner.invoke(app, [*args, "--output", "json"])
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


class TestCatalogCommands:

    def test_translations_json(self, library):
        data = invoke_json("translations")

        assert [t["identifier"] for t in data] == ["kjv", "ro-cornilescu"]
        assert data[1]["language"] == "romanian"

    def test_translations_table(self, library):
        result = runner.invoke(app, ["translations"])

        assert result.exit_code == 0
        assert "2 translation(s)" in result.stdout

    def test_books(self, library):
        data = invoke_json("books", "--translation", "ro-cornilescu")
        assert [b["book_id"] for b in data] == ["JHN"]

    def test_chapters(self, library):
        data = invoke_json("chapters", "Obadiah")
        assert len(data) == 1

    def test_unknown_book(self, library):
        result = runner.invoke(app, ["chapters", "Hezekiah"])
        assert result.exit_code == 1

    def test_unknown_translation(self, library):
        result = runner.invoke(app, ["books", "-t", "nope"])
        assert result.exit_code == 1


class TestVerseCommands:

    def test_verses(self, library):
        data = invoke_json("verses", "John 3:16-17")

        assert data["translation"]["identifier"] == "kjv"
        assert [v["verse_number"] for v in data["verses"]] == [16, 17]

    def test_invalid_reference(self, library):
        result = runner.invoke(app, ["verses", "not a reference"])
        assert result.exit_code == 1

    def test_random(self, library):
        data = invoke_json("random", "--books", "OBA")
        assert data["random_verse"]["book_id"] == "OBA"

    def test_random_no_books(self, library):
        result = runner.invoke(app, ["random", "--books", "nope"])
        assert result.exit_code == 1

    def test_daily(self, library):
        data = invoke_json("daily")
        assert data["random_verse"]["text"]

    def test_search(self, library):
        data = invoke_json("search", "dumnezeu", "-t", "ro-cornilescu", "--limit", "1")
        assert len(data["verses"]) == 1

    def test_search_invalid_limit(self, library):
        result = runner.invoke(app, ["search", "god", "--limit", "0"])
        assert result.exit_code == 1


class TestHealthCommand:

    def test_healthy(self, library):
        assert invoke_json("health")["status"] == "healthy"

    def test_misconfigured_storage(self, library, monkeypatch):
        monkeypatch.setenv("STORAGE_LOCAL_PATH", str(library / "missing"))

        result = runner.invoke(app, ["health"])

        assert result.exit_code == 2
