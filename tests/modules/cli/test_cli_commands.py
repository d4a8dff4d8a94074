from __future__ import annotations

import json
from pathlib import Path

import pytest

from vocab_master.app import VocabMaster
from vocab_master.cli import args as cli_args
from vocab_master.cli.main import run_cli


@pytest.fixture
def cli(tmp_path: Path, fetcher):
    storage = tmp_path / "vocab.json"

    def factory(settings):
        return VocabMaster(settings, fetcher=fetcher, quiz_id_factory=lambda: "quiz-1")

    def invoke(*argv: str, confirm=None) -> int:
        return run_cli(["--storage", str(storage), *argv], app_factory=factory, confirm=confirm)

    invoke.storage = storage
    return invoke


def test_parse_define_joins_words_and_keeps_options():
    parsed = cli_args.parse_cli_args(
        ["--storage", ":memory:", "define", "carpe", "diem", "-n", "12", "--tone", "casual"]
    )

    assert parsed.command == "define"
    assert parsed.word == "carpe diem"
    assert parsed.length == "12"
    assert parsed.tone == "casual"
    assert parsed.storage_path == ":memory:"


def test_parse_history_defaults_to_newest_listing():
    parsed = cli_args.parse_cli_args(["history"])

    assert parsed.command == "history"
    assert parsed.history_command is None
    assert parsed.sort == "newest"


def test_parse_rejects_unknown_sort_order():
    with pytest.raises(SystemExit):
        cli_args.parse_cli_args(["favorites", "list", "--sort", "random"])


def test_define_then_cache_hit(cli, fetcher, capsys):
    assert cli("define", "Ephemeral", "-n", "25", "--tone", "formal") == 0
    first = capsys.readouterr().out
    assert cli("define", "ephemeral", "--length", "25", "--tone", "Formal") == 0
    second = capsys.readouterr().out

    assert "Definition of Ephemeral." in first
    assert "Definition loaded from local cache." in second
    assert "cached" in second
    assert len(fetcher.requests) == 1

    document = json.loads(cli.storage.read_text(encoding="utf-8"))
    assert "@VocabMaster:history_v2" in document["entries"]


def test_define_uses_default_length(cli, fetcher):
    assert cli("define", "Serendipity") == 0
    assert fetcher.requests[0].length == 30


def test_invalid_length_fails(cli, fetcher, capsys):
    assert cli("define", "Ephemeral", "-n", "500") == 1

    assert "Please enter a valid length (1-250)." in capsys.readouterr().err
    assert fetcher.requests == []


def test_history_listing_and_clear(cli, capsys):
    cli("define", "Ephemeral", "-n", "25")
    cli("define", "Apple", "-n", "10", "--lang", "fr")
    capsys.readouterr()

    assert cli("history", "--sort", "a-z") == 0
    listing = capsys.readouterr().out
    assert listing.index("Apple") < listing.index("Ephemeral")
    assert "10 words" in listing

    assert cli("history", "clear", confirm=lambda prompt: "n") == 0
    assert "History left unchanged." in capsys.readouterr().out

    assert cli("history", "clear", "--yes") == 0
    assert "Search History Cleared" in capsys.readouterr().out

    cli("history")
    assert "No search history yet." in capsys.readouterr().out


def test_history_replay(cli, fetcher, capsys):
    cli("define", "Ephemeral", "-n", "25", "--lang", "en")
    capsys.readouterr()

    assert cli("history", "replay", "1") == 0
    assert "Definition loaded from local cache." in capsys.readouterr().out
    assert cli("history", "replay", "9") == 1
    assert len(fetcher.requests) == 1


def test_favorites_commands(cli, capsys):
    assert cli("favorites", "add", "Ephemeral") == 0
    assert cli("favorites", "add", "ephemeral") == 0
    out = capsys.readouterr().out
    assert "Favorited: Ephemeral" in out
    assert "ephemeral is already in favorites." in out

    cli("favorites", "list")
    assert " - Ephemeral" in capsys.readouterr().out

    cli("favorites", "remove", "EPHEMERAL")
    cli("favorites", "list")
    out = capsys.readouterr().out
    assert "Unfavorited: EPHEMERAL" in out
    assert "No favorites yet." in out


def test_quiz_commands(cli, capsys):
    cli("define", "Serendipity")
    assert cli("quiz", "add", "Serendipity") == 0
    capsys.readouterr()

    cli("quiz", "list")
    assert "Serendipity [quiz-1]" in capsys.readouterr().out

    assert cli("quiz", "preview", "quiz-1") == 0
    assert "Serendipity: Definition of Serendipity." in capsys.readouterr().out

    assert cli("quiz", "preview", "missing") == 1

    assert cli("quiz", "remove", "quiz-1") == 0
    assert "Removed from Quiz List: Serendipity" in capsys.readouterr().out


def test_cache_clear(cli, capsys):
    cli("define", "Ephemeral", "-n", "25")
    capsys.readouterr()

    assert cli("cache", "clear") == 0
    assert "1 definition(s) cleared from cache." in capsys.readouterr().out


def test_featured(cli, fetcher, capsys):
    assert cli("featured") == 0
    assert fetcher.requests[0].word == "Ephemeral"
    assert fetcher.requests[0].tone == "formal"


def test_invalid_configuration_reports_error(cli, tmp_path, capsys):
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"history_max_items": 0}), encoding="utf-8")

    assert cli("--config", str(bad), "history") == 1
    assert "Configuration error" in capsys.readouterr().err
