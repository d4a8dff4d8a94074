from __future__ import annotations

import os
from pathlib import Path

from vocab_master import environment


def test_candidate_files_are_ordered_by_precedence(tmp_path: Path, monkeypatch):
    explicit = tmp_path / "custom.env"
    monkeypatch.setenv(environment.ENV_FILE_VAR, str(explicit))
    monkeypatch.setenv(environment.ENV_NAME_VAR, "staging")

    files = environment.candidate_env_files([tmp_path])

    assert files == [
        explicit.resolve(),
        (tmp_path / ".env.local").resolve(),
        (tmp_path / ".env.staging").resolve(),
        (tmp_path / ".env").resolve(),
    ]


def test_load_environment_prefers_local_file_and_existing_values(tmp_path: Path, monkeypatch):
    (tmp_path / ".env").write_text("VOCAB_MASTER_TEST_A=base\nVOCAB_MASTER_TEST_B=base\n", encoding="utf-8")
    (tmp_path / ".env.local").write_text("VOCAB_MASTER_TEST_A=local\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(environment.ENV_FILE_VAR, raising=False)
    monkeypatch.delenv(environment.ENV_NAME_VAR, raising=False)
    monkeypatch.setenv("VOCAB_MASTER_TEST_B", "preset")
    monkeypatch.delenv("VOCAB_MASTER_TEST_A", raising=False)

    try:
        applied = environment.load_environment(force=True)
        assert (tmp_path / ".env.local").resolve() in applied
        assert os.environ["VOCAB_MASTER_TEST_A"] == "local"
        assert os.environ["VOCAB_MASTER_TEST_B"] == "preset"
    finally:
        os.environ.pop("VOCAB_MASTER_TEST_A", None)
