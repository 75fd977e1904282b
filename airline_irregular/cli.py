from __future__ import annotations

import logging
import sys
from typing import List, Optional

import click
from pydantic import ValidationError

from .config import Settings, get_settings
from .runner import SOURCES, get_source, run_all, run_check

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(log_file: Optional[str] = None) -> None:
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(level=logging.INFO, handlers=handlers, format=LOG_FORMAT)


def load_settings() -> Settings:
    try:
        settings = get_settings()
    except ValidationError as exc:
        configure_logging()
        logger.error("Invalid configuration: %s", exc)
        sys.exit(1)
    configure_logging(settings.log_file)
    return settings


@click.group()
@click.version_option(package_name="airline-irregular-notifier")
def cli() -> None:
    """航空会社の運航情報を取得してSlackに通知するCLIツール"""


def _make_source_command(key: str) -> click.Command:
    source_cls = SOURCES[key]

    @click.command(
        name=key,
        help=f"{source_cls.name}の運航情報を取得してSlackに通知します",
    )
    @click.option(
        "--icon",
        default=source_cls.default_icon,
        show_default=True,
        help="Slackに投稿する際のアイコン絵文字",
    )
    @click.option(
        "--username",
        default=source_cls.default_username,
        show_default=True,
        help="Slackに投稿する際のユーザー名",
    )
    @click.option("--force", is_flag=True, help="強制的に通知を送信する")
    def command(icon: str, username: str, force: bool) -> None:
        settings = load_settings()
        try:
            decision = run_check(
                get_source(key),
                settings=settings,
                force=force,
                icon=icon,
                username=username,
            )
        except Exception:
            logger.exception("[%s] check failed", key)
            sys.exit(1)
        click.echo(f"{key}: {decision.action.value} ({decision.reason})")

    return command


for _key in SOURCES:
    cli.add_command(_make_source_command(_key))


@cli.command(name="all")
@click.option("--force", is_flag=True, help="強制的に通知を送信する")
def all_sources(force: bool) -> None:
    """Check every airline in turn."""
    settings = load_settings()
    results = run_all(settings, force=force)
    for key, ok in results.items():
        click.echo(f"{key}: {'ok' if ok else 'failed'}")
    if not all(results.values()):
        sys.exit(1)


@cli.command()
def schedule() -> None:
    """Check every airline periodically until interrupted."""
    from . import tasks

    settings = load_settings()
    try:
        tasks.start(settings)
    except KeyboardInterrupt:
        logger.info("Scheduler stopped")


if __name__ == "__main__":
    cli()
