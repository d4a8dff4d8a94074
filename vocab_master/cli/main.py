"""Console-script entry point for vocab-master."""

from __future__ import annotations

import asyncio
import sys
from typing import Callable, Optional, Sequence

from vocab_master import logging_manager as log_mgr
from vocab_master.app import VocabMaster
from vocab_master.config_manager import ConfigurationError, VocabMasterSettings, load_configuration

from .args import parse_cli_args
from .commands import ConfirmPrompt, execute_command, print_notice

logger = log_mgr.get_logger().getChild("cli")

AppFactory = Callable[[VocabMasterSettings], VocabMaster]


async def _run(
    factory: AppFactory, settings: VocabMasterSettings, args, confirm: Optional[ConfirmPrompt]
) -> int:
    app = factory(settings)
    unsubscribe = app.notices.subscribe(print_notice)
    try:
        await app.initialize()
        return await execute_command(app, args, confirm=confirm)
    finally:
        unsubscribe()
        await app.aclose()


def run_cli(
    argv: Optional[Sequence[str]] = None,
    *,
    app_factory: Optional[AppFactory] = None,
    confirm: Optional[ConfirmPrompt] = None,
) -> int:
    """Parse ``argv``, load configuration and run the selected command."""

    args = parse_cli_args(argv)
    overrides = {
        "storage_path": args.storage_path,
        "define_endpoint": args.define_endpoint,
        "debug": True if args.debug else None,
    }
    try:
        settings = load_configuration(args.config, overrides=overrides)
    except ConfigurationError as exc:
        cause = exc.__cause__ or exc
        log_mgr.console_error("Configuration error: %s", cause, logger_obj=logger)
        return 1
    log_mgr.configure_logging_level(debug_enabled=settings.debug)

    factory = app_factory or VocabMaster
    return asyncio.run(_run(factory, settings, args, confirm))


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the vocab-master CLI."""

    return run_cli(argv)


if __name__ == "__main__":  # pragma: no cover - manual execution
    sys.exit(main())
