#!/usr/bin/env python3
"""Easy!Appointments appointment reminders.

Usage:
    appointment-reminders [--debug] [--config PATH] [--once]

Examples:
    appointment-reminders                      # Run forever, reading .env if present
    appointment-reminders -c /etc/reminders.env
    appointment-reminders --once --debug       # One cycle, then exit
"""

import argparse
import asyncio
import os
import sys

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from config import Config, load_config
from logger import logger, setup_logging
from reminders.api_client import SchedulingApiClient
from reminders.engine import ReminderEngine
from reminders.errors import ConfigError, StateCorruptError
from reminders.loop import ReminderLoop
from reminders.mailer import SmtpMailer
from reminders.state_store import StateStore


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Easy!Appointments appointment reminders")
    parser.add_argument("-d", "--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("-c", "--config", metavar="PATH", help="Dotenv file with REMINDERS_* settings")
    parser.add_argument("--once", action="store_true", help="Run a single cycle and exit")
    return parser.parse_args(argv)


def build_loop(config: Config) -> ReminderLoop:
    """Wire the engine from config and load the notified-ID set.

    Raises:
        StateCorruptError: If the state file can't be parsed
    """
    store = StateStore(config.state_file)
    state = frozenset(store.load())
    logger.info(f"Loaded {len(state)} previously notified appointments from {config.state_file}")

    api = SchedulingApiClient(config.api_root, config.api_key, timeout=config.http_timeout)
    mailer = SmtpMailer(
        host=config.smtp_host,
        user=config.smtp_user,
        password=config.smtp_pass,
        from_addr=config.email_from,
        reply_to=config.email_reply_to,
        subject=config.email_subject,
        body_template=config.email_body,
        port=config.smtp_port,
        starttls=config.smtp_starttls,
        timeout=config.smtp_timeout,
        display_timezone=config.display_timezone,
    )
    engine = ReminderEngine(api, mailer, store, window=config.reminder_window)
    return ReminderLoop(engine, state, interval=config.check_interval)


async def run_forever(loop: ReminderLoop) -> None:
    """Start the scheduler and block until the process is killed."""
    scheduler = AsyncIOScheduler()
    loop.schedule(scheduler)
    scheduler.start()
    logger.info(f"Scheduler started with {len(scheduler.get_jobs())} jobs")
    await asyncio.Event().wait()


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    debug = args.debug or os.getenv("LOG_LEVEL", "").upper() == "DEBUG"
    setup_logging(debug=debug)
    logger.debug("Logging configured")

    try:
        config = load_config(args.config)
    except ConfigError as e:
        logger.error(str(e))
        return 1

    if config.log_dir:
        setup_logging(debug=debug, log_dir=config.log_dir)
    logger.debug(f"Using {config!r}")

    try:
        loop = build_loop(config)
    except StateCorruptError as e:
        logger.error(f"Refusing to start, state file is corrupt: {e}")
        return 1

    if args.once:
        asyncio.run(loop.run(max_cycles=1))
        return 0

    asyncio.run(run_forever(loop))
    return 0


if __name__ == "__main__":
    sys.exit(main())
