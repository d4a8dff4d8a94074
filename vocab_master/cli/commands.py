"""Sub-command handlers for the vocab-master CLI."""

from __future__ import annotations

import argparse
from typing import Callable, Optional

from vocab_master import logging_manager as log_mgr
from vocab_master.app import VocabMaster
from vocab_master.ledgers import HistoryItem
from vocab_master.notifications import Notice, NoticeLevel
from vocab_master.services import DefineOutcome

logger = log_mgr.get_logger().getChild("cli")

ConfirmPrompt = Callable[[str], str]


def print_notice(notice: Notice) -> None:
    if notice.level is NoticeLevel.ERROR:
        log_mgr.console_error(notice.message, logger_obj=logger)
    else:
        log_mgr.console_info(notice.message, logger_obj=logger)


def _print_outcome(outcome: DefineOutcome) -> int:
    if not outcome.ok or outcome.result is None:
        # The failure message was already printed as a notice.
        return 1
    result = outcome.result
    details = [result.status or "ok", f"{result.actual_length} words"]
    if result.config.effective_lang:
        details.append(result.config.effective_lang)
    if outcome.from_cache:
        details.append("cached")
    log_mgr.console_info("%s (%s)", result.word, ", ".join(details), logger_obj=logger)
    log_mgr.console_info("%s", result.result, logger_obj=logger)
    return 0


def _describe_history(position: int, item: HistoryItem) -> str:
    settings = [f"{item.length} words"]
    for value in (item.tone, item.context, item.lang):
        if value:
            settings.append(value)
    return f"{position:>3}. {item.word} ({', '.join(settings)})"


async def _define(app: VocabMaster, args: argparse.Namespace) -> int:
    length = args.length if args.length is not None else app.settings.default_requested_length
    outcome = await app.define(
        args.word, length, tone=args.tone, context=args.context, lang=args.lang
    )
    return _print_outcome(outcome)


async def _history(app: VocabMaster, args: argparse.Namespace, confirm: ConfirmPrompt) -> int:
    command = getattr(args, "history_command", None)
    if command == "clear":
        if not args.yes:
            answer = confirm("Clear all search history? [y/N]: ")
            if answer.strip().lower() not in {"y", "yes"}:
                log_mgr.console_info("History left unchanged.", logger_obj=logger)
                return 0
        await app.clear_history()
        return 0

    if command == "replay":
        items = app.history.items
        if args.position < 1 or args.position > len(items):
            log_mgr.console_error(
                "No history entry at position %d.", args.position, logger_obj=logger
            )
            return 1
        outcome = await app.replay(items[args.position - 1])
        return _print_outcome(outcome)

    items = app.history.sorted_items(args.sort)
    if not items:
        log_mgr.console_info("No search history yet.", logger_obj=logger)
        return 0
    for position, item in enumerate(items, start=1):
        log_mgr.console_info("%s", _describe_history(position, item), logger_obj=logger)
    return 0


async def _favorites(app: VocabMaster, args: argparse.Namespace) -> int:
    command = args.favorites_command
    if command == "add":
        await app.favorites.add(args.word)
        return 0
    if command == "remove":
        await app.favorites.remove(args.word)
        return 0

    items = app.favorites.sorted_items(args.sort)
    if not items:
        log_mgr.console_info("No favorites yet.", logger_obj=logger)
        return 0
    for item in items:
        log_mgr.console_info(" - %s", item.word, logger_obj=logger)
    return 0


async def _quiz(app: VocabMaster, args: argparse.Namespace) -> int:
    command = args.quiz_command
    if command == "add":
        await app.quiz_list.add(args.word)
        return 0
    if command == "remove":
        await app.quiz_list.remove(args.item_id)
        return 0
    if command == "preview":
        item = app.quiz_list.get(args.item_id)
        if item is None:
            log_mgr.console_error("Unknown quiz item: %s", args.item_id, logger_obj=logger)
            return 1
        text = await app.quiz_definition(args.item_id)
        if text is None:
            log_mgr.console_info(
                "No cached definition for %s. Define it first to preview it here.",
                item.word,
                logger_obj=logger,
            )
            return 0
        log_mgr.console_info("%s: %s", item.word, text, logger_obj=logger)
        return 0

    if not len(app.quiz_list):
        log_mgr.console_info("The Quiz list is empty.", logger_obj=logger)
        return 0
    for item in app.quiz_list.items:
        log_mgr.console_info(" - %s [%s]", item.word, item.id, logger_obj=logger)
    return 0


async def _cache(app: VocabMaster, args: argparse.Namespace) -> int:
    outcome = await app.clear_cache()
    return 0 if outcome.ok else 1


async def execute_command(
    app: VocabMaster,
    args: argparse.Namespace,
    *,
    confirm: Optional[ConfirmPrompt] = None,
) -> int:
    """Dispatch one parsed CLI invocation against an initialized application."""

    command = args.command
    if command == "define":
        return await _define(app, args)
    if command == "featured":
        return _print_outcome(await app.define_featured())
    if command == "history":
        return await _history(app, args, confirm or input)
    if command == "favorites":
        return await _favorites(app, args)
    if command == "quiz":
        return await _quiz(app, args)
    if command == "cache":
        return await _cache(app, args)

    log_mgr.console_error("Unknown command: %s", command, logger_obj=logger)
    return 1


__all__ = ["execute_command", "print_notice"]
