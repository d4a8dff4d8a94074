"""Argument parsing helpers for the vocab-master CLI."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from vocab_master.ledgers import SortOrder

_SORT_CHOICES = [order.value for order in SortOrder]


def _add_shared_arguments(parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
    parser.add_argument(
        "--config",
        default=None,
        help=(
            "Path to a configuration override JSON file (defaults to conf/config.local.json "
            "if present)."
        ),
    )
    parser.add_argument(
        "--storage",
        dest="storage_path",
        help="Override the JSON store path (use ':memory:' for a throwaway session).",
    )
    parser.add_argument("--endpoint", dest="define_endpoint", help="Override the Define Service URL.")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging output.")
    return parser


def _add_request_arguments(parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
    parser.add_argument(
        "-n",
        "--length",
        default=None,
        help="Requested definition length in words (defaults to the configured length).",
    )
    parser.add_argument("--tone", help="Tone of the definition, e.g. formal or casual.")
    parser.add_argument("--context", help="Context the word is used in, e.g. legal.")
    parser.add_argument("--lang", help="Language of the definition (service decides when omitted).")
    return parser


def build_cli_parser() -> argparse.ArgumentParser:
    """Build the CLI parser with explicit sub-commands."""

    parser = argparse.ArgumentParser(
        prog="vocab-master",
        description="Look up, cache and organise word definitions.",
        allow_abbrev=False,
    )
    _add_shared_arguments(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    define_parser = subparsers.add_parser(
        "define", help="Define a word or phrase", allow_abbrev=False
    )
    define_parser.add_argument("word", nargs="+", help="Word or phrase to define.")
    _add_request_arguments(define_parser)

    subparsers.add_parser("featured", help="Define the featured word", allow_abbrev=False)

    history_parser = subparsers.add_parser(
        "history", help="Show or manage search history", allow_abbrev=False
    )
    history_parser.add_argument(
        "--sort", choices=_SORT_CHOICES, default=SortOrder.NEWEST.value, help="Display order."
    )
    history_subparsers = history_parser.add_subparsers(dest="history_command")
    clear_parser = history_subparsers.add_parser(
        "clear", help="Delete all search history", allow_abbrev=False
    )
    clear_parser.add_argument(
        "--yes", action="store_true", help="Skip the confirmation prompt."
    )
    replay_parser = history_subparsers.add_parser(
        "replay", help="Define a history entry again", allow_abbrev=False
    )
    replay_parser.add_argument(
        "position", type=int, help="1-based position in the newest-first history list."
    )

    favorites_parser = subparsers.add_parser(
        "favorites", help="Manage favorite words", allow_abbrev=False
    )
    favorites_subparsers = favorites_parser.add_subparsers(dest="favorites_command", required=True)
    fav_list = favorites_subparsers.add_parser("list", help="List favorites", allow_abbrev=False)
    fav_list.add_argument(
        "--sort", choices=_SORT_CHOICES, default=SortOrder.NEWEST.value, help="Display order."
    )
    fav_add = favorites_subparsers.add_parser("add", help="Add a favorite", allow_abbrev=False)
    fav_add.add_argument("word", nargs="+", help="Word to favorite.")
    fav_remove = favorites_subparsers.add_parser(
        "remove", help="Remove a favorite", allow_abbrev=False
    )
    fav_remove.add_argument("word", nargs="+", help="Word to unfavorite.")

    quiz_parser = subparsers.add_parser("quiz", help="Manage the quiz list", allow_abbrev=False)
    quiz_subparsers = quiz_parser.add_subparsers(dest="quiz_command", required=True)
    quiz_subparsers.add_parser("list", help="List quiz words", allow_abbrev=False)
    quiz_add = quiz_subparsers.add_parser("add", help="Queue a word for review", allow_abbrev=False)
    quiz_add.add_argument("word", nargs="+", help="Word to add.")
    quiz_remove = quiz_subparsers.add_parser(
        "remove", help="Remove a quiz item by id", allow_abbrev=False
    )
    quiz_remove.add_argument("item_id", help="Quiz item id as shown by 'quiz list'.")
    quiz_preview = quiz_subparsers.add_parser(
        "preview", help="Show the cached definition of a quiz item", allow_abbrev=False
    )
    quiz_preview.add_argument("item_id", help="Quiz item id as shown by 'quiz list'.")

    cache_parser = subparsers.add_parser(
        "cache", help="Manage cached definitions", allow_abbrev=False
    )
    cache_subparsers = cache_parser.add_subparsers(dest="cache_command", required=True)
    cache_subparsers.add_parser("clear", help="Remove every cached definition", allow_abbrev=False)

    return parser


def parse_cli_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse ``argv`` and join multi-token words into a single string."""

    namespace = build_cli_parser().parse_args(argv)
    if isinstance(getattr(namespace, "word", None), list):
        namespace.word = " ".join(namespace.word)
    return namespace


__all__ = ["build_cli_parser", "parse_cli_args"]
