"""Load ``.env`` files before any configuration is read."""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional, Tuple

from dotenv import load_dotenv

ENV_FILE_VAR = "VOCAB_MASTER_ENV_FILE"
ENV_NAME_VAR = "VOCAB_MASTER_ENV"

PROJECT_DIR = Path(__file__).resolve().parents[1]

_applied: Optional[Tuple[Path, ...]] = None


def candidate_env_files(search_dirs: Optional[List[Path]] = None) -> List[Path]:
    """Return dotenv files to try, highest precedence first.

    Files named in ``VOCAB_MASTER_ENV_FILE`` (``os.pathsep`` separated) come
    first. Each search directory then contributes ``.env.local``,
    ``.env.<VOCAB_MASTER_ENV>`` and ``.env``. The working directory is searched
    before the project directory.
    """
    files: List[Path] = []
    for value in os.environ.get(ENV_FILE_VAR, "").split(os.pathsep):
        if value.strip():
            files.append(Path(value.strip()).expanduser().resolve())

    names = [".env.local"]
    env_name = os.environ.get(ENV_NAME_VAR, "").strip()
    if env_name:
        names.append(f".env.{env_name}")
    names.append(".env")

    directories = search_dirs if search_dirs is not None else [Path.cwd(), PROJECT_DIR]
    for directory in directories:
        files.extend((directory / name).resolve() for name in names)
    return list(dict.fromkeys(files))


def load_environment(*, force: bool = False) -> Tuple[Path, ...]:
    """Apply every existing candidate file once; variables already set win."""
    global _applied
    if _applied is not None and not force:
        return _applied

    applied = [
        path
        for path in candidate_env_files()
        if path.is_file() and load_dotenv(path, override=False)
    ]
    _applied = tuple(applied)
    return _applied


__all__ = ["ENV_FILE_VAR", "ENV_NAME_VAR", "candidate_env_files", "load_environment"]
