"""CLI commands for talkvote."""

import json
import logging
import random
import sys
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import click
import structlog

from talkvote import __version__
from talkvote.config.constants import COMPONENT_CLI
from talkvote.errors import TalkvoteError
from talkvote.observability.logging import (
    bind_session_context,
    clear_session_context,
    configure_logging,
)
from talkvote.ranking import (
    ConsoleChannel,
    RankingEngine,
    RankingMetrics,
    classify_confirmation,
    random_permutation,
)
from talkvote.ranking.prompts import ANSWER_PROMPT
from talkvote.settings import AppSettings, get_settings
from talkvote.store import StoreMetrics, VoteStore
from talkvote.suggestions import SuggestionFlow, show_existing_topics


logger = structlog.get_logger()


@dataclass
class CommandOptions:
    """Options shared by the interactive commands."""

    db_path: Path | None
    user: str | None
    json_logs: bool
    verbose: bool


@dataclass
class CommandContext:
    """Everything a command body needs once setup has succeeded."""

    store: VoteStore
    channel: ConsoleChannel
    user: str
    session_id: str
    log: structlog.typing.FilteringBoundLogger


CommandBody = Callable[[CommandContext], None]


def _report_failure(message: str) -> None:
    click.echo("We have a problem:", err=True)
    click.echo(message, err=True)


def _load_settings() -> AppSettings:
    try:
        return get_settings()
    except TalkvoteError as e:
        _report_failure(str(e))
        sys.exit(1)


def _run_command(command: str, options: CommandOptions, body: CommandBody) -> None:
    """Set up logging, identity, and the store, then run a command body.

    Any TalkvoteError ends the process with exit status 1.

    Args:
        command: Command name for logging.
        options: Parsed command-line options.
        body: The command itself.
    """
    settings = _load_settings()
    json_logs = options.json_logs or settings.json_logs
    db_path = options.db_path or settings.db_path
    session_id = str(uuid.uuid4())

    configure_logging(
        level=logging.DEBUG if options.verbose else logging.WARNING,
        json_format=json_logs,
    )
    log = logger.bind(
        component=COMPONENT_CLI,
        command=command,
        session_id=session_id,
    )

    try:
        user = settings.resolve_user(options.user)
        bind_session_context(session_id, user)
        log.info("command_started", db_path=str(db_path))

        with VoteStore(db_path, session_id=session_id) as store:
            body(
                CommandContext(
                    store=store,
                    channel=ConsoleChannel(),
                    user=user,
                    session_id=session_id,
                    log=log,
                )
            )
    except TalkvoteError as e:
        log.error("command_failed", error_type=type(e).__name__, error=str(e))
        _report_failure(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        log.warning("command_interrupted")
        click.echo("\nInterrupted", err=True)
        sys.exit(1)
    finally:
        log.debug("store_metrics", **StoreMetrics.get_instance().to_dict())
        log.debug("ranking_metrics", **RankingMetrics.get_instance().to_dict())
        clear_session_context()

    log.info("command_complete")


def _engine(ctx: CommandContext, seed: int | None) -> RankingEngine:
    permute = random_permutation(random.Random(seed)) if seed is not None else None
    return RankingEngine(
        store=ctx.store,
        channel=ctx.channel,
        user=ctx.user,
        permute=permute,
        session_id=ctx.session_id,
    )


def _rank_body(seed: int | None) -> CommandBody:
    def body(ctx: CommandContext) -> None:
        topics = ctx.store.list_topics()
        votes = _engine(ctx, seed).rank(topics)
        ctx.log.info("ranking_finished", votes=len(votes))

    return body


def _suggest_body(ctx: CommandContext) -> None:
    show_existing_topics(ctx.channel, ctx.store.list_topics())
    created = SuggestionFlow(
        ctx.store, ctx.channel, ctx.user, session_id=ctx.session_id
    ).run()
    ctx.log.info("suggestions_finished", created=len(created))


def _session_body(seed: int | None) -> CommandBody:
    def body(ctx: CommandContext) -> None:
        _suggest_body(ctx)

        ctx.channel.show("Ready to rank the topics [Y/n]?")
        reply = ctx.channel.ask(ANSWER_PROMPT)
        if not classify_confirmation(reply).is_accepted:
            ctx.channel.show("Ok, but please come back to do so. Your opinion matters!")
            return

        _rank_body(seed)(ctx)
        ctx.channel.show()

    return body


def _interactive_options(func: Callable[..., None]) -> Callable[..., None]:
    """Attach the options every interactive command takes."""
    decorators = [
        click.option(
            "--db",
            "db_path",
            type=click.Path(dir_okay=False, path_type=Path),
            default=None,
            help="SQLite vote database (default: TALKVOTE_DB_PATH or data/talkvote.sqlite)",
        ),
        click.option(
            "--user",
            default=None,
            help="Vote as this user (default: TALKVOTE_USER or the OS username)",
        ),
        click.option(
            "--json-logs",
            is_flag=True,
            default=False,
            help="Write logs to stderr as JSON (default: TALKVOTE_JSON_LOGS)",
        ),
        click.option(
            "--verbose",
            "-v",
            is_flag=True,
            default=False,
            help="Log debug output to stderr",
        ),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """Collect discussion topics and rank them from most to least interesting."""


@cli.command()
@click.option(
    "--db",
    "db_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="SQLite vote database (default: TALKVOTE_DB_PATH or data/talkvote.sqlite)",
)
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    default=False,
    help="Print topics as JSON",
)
def topics(db_path: Path | None, json_output: bool) -> None:
    """List suggested topics, most voted first."""
    settings = _load_settings()
    db_path = db_path or settings.db_path
    configure_logging(level=logging.WARNING, json_format=settings.json_logs)

    try:
        with VoteStore(db_path) as store:
            buckets = store.topic_buckets()
    except TalkvoteError as e:
        _report_failure(str(e))
        sys.exit(1)

    if json_output:
        click.echo(json.dumps([b.model_dump() for b in buckets], indent=2))
        return

    if not buckets:
        click.echo("No topics available")
        return

    for number, bucket in enumerate(buckets, start=1):
        click.echo(
            f"#{number:02d} {bucket.title} "
            f"(votes: {bucket.vote_count}, points: {bucket.total_points})"
        )


@cli.command()
@_interactive_options
def suggest(
    db_path: Path | None, user: str | None, json_logs: bool, verbose: bool
) -> None:
    """Propose new topics."""
    options = CommandOptions(
        db_path=db_path, user=user, json_logs=json_logs, verbose=verbose
    )
    _run_command("suggest", options, _suggest_body)


@cli.command()
@_interactive_options
@click.option(
    "--seed",
    type=int,
    default=None,
    help="Seed the order topics are first shown in",
)
def rank(
    db_path: Path | None,
    user: str | None,
    json_logs: bool,
    verbose: bool,
    seed: int | None,
) -> None:
    """Rank every topic, most interesting first."""
    options = CommandOptions(
        db_path=db_path, user=user, json_logs=json_logs, verbose=verbose
    )
    _run_command("rank", options, _rank_body(seed))


@cli.command()
@_interactive_options
@click.option(
    "--seed",
    type=int,
    default=None,
    help="Seed the order topics are first shown in",
)
def session(
    db_path: Path | None,
    user: str | None,
    json_logs: bool,
    verbose: bool,
    seed: int | None,
) -> None:
    """List topics, take suggestions, then rank everything."""
    options = CommandOptions(
        db_path=db_path, user=user, json_logs=json_logs, verbose=verbose
    )
    _run_command("session", options, _session_body(seed))


if __name__ == "__main__":
    cli()
