"""moodrelay CLI commands."""

from __future__ import annotations

import asyncio
import dataclasses
from collections.abc import Awaitable, Callable
from typing import TypeVar

import rich_click as click

from moodrelay.cli.output import error_exit, output_json, print_fields, print_table
from moodrelay.client import AnalysisRequest, BackendClient, MoodRelayError
from moodrelay.config import BackendClientConfig
from moodrelay.logging_config import configure_logging

T = TypeVar("T")

ANALYSIS_FIELDS = [
    "sentiment",
    "emotion",
    "stress_score",
    "category",
    "confidence",
    "suggested_reply",
]
STATS_FIELDS = [
    "positive_pct",
    "neutral_pct",
    "negative_pct",
    "avg_stress",
    "trend",
    "total_messages",
]


@click.group()
@click.version_option(package_name="moodrelay")
@click.option(
    "--base-url",
    "-u",
    default=None,
    help="Backend base URL (default: $BACKEND_API_URL)",
)
@click.option(
    "--timeout",
    "-t",
    type=float,
    default=None,
    help="Request timeout in seconds (default: $API_TIMEOUT ms, or 10s)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Log level for client diagnostics",
)
@click.pass_context
def cli(ctx: click.Context, base_url: str | None, timeout: float | None, log_level: str) -> None:
    """moodrelay - Sentiment backend relay for chat bots.

    Talks to the sentiment-analysis backend the bot extension forwards
    chat messages to. Configuration comes from the environment
    (**BACKEND_API_URL**, **API_TIMEOUT**, ...) unless overridden here.

    **Commands:**

        moodrelay check      Validate configuration and backend health

        moodrelay analyze    Analyze a single message

        moodrelay stats      Today's team mood statistics

        moodrelay trends     Historical mood trends
    """
    configure_logging(level=log_level)
    ctx.obj = {"base_url": base_url, "timeout": timeout}


@cli.command()
@click.pass_context
def check(ctx: click.Context) -> None:
    """Validate configuration and backend health.

    Exits with status 1 if the base URL is missing or the backend is
    unreachable or unhealthy.

    **Examples:**

        moodrelay check

        moodrelay --base-url http://localhost:8000 check
    """
    config = _load_config(ctx)
    _run(config, lambda client: client.validate_config())
    click.echo(f"Backend is healthy at {config.base_url}")


@cli.command()
@click.argument("message")
@click.option("--user-id", default=None, help="User the message came from")
@click.option("--channel-id", default=None, help="Channel the message was posted in")
@click.option("--json", "-j", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def analyze(
    ctx: click.Context,
    message: str,
    user_id: str | None,
    channel_id: str | None,
    json_output: bool,
) -> None:
    """Analyze the sentiment of MESSAGE.

    **Examples:**

        moodrelay analyze "I'm feeling overwhelmed with work"

        moodrelay analyze "Great sprint, team!" --channel-id general --json
    """
    try:
        request = AnalysisRequest(message=message, user_id=user_id, channel_id=channel_id)
    except MoodRelayError as e:
        error_exit(str(e))

    result = _run(_load_config(ctx), lambda client: client.analyze(request))
    if json_output:
        output_json(result)
    else:
        print_fields(_require_object(result), ANALYSIS_FIELDS)


@cli.command()
@click.option("--channel-id", default=None, help="Only count messages from this channel")
@click.option("--json", "-j", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def stats(ctx: click.Context, channel_id: str | None, json_output: bool) -> None:
    """Show today's team mood statistics.

    **Examples:**

        moodrelay stats

        moodrelay stats --channel-id engineering --json
    """
    result = _run(_load_config(ctx), lambda client: client.get_today_stats(channel_id))
    if json_output:
        output_json(result)
        return

    result = _require_object(result)
    print_fields(result, STATS_FIELDS)
    issues = result.get("top_issues")
    rows = [
        [str(i.get("category", "?")), str(i.get("count", 0))]
        for i in (issues if isinstance(issues, list) else [])
        if isinstance(i, dict)
    ]
    if rows:
        click.echo("")
        print_table(["Issue", "Count"], rows)


@cli.command()
@click.option("--days", "-d", type=click.IntRange(min=1), default=7, show_default=True)
@click.option("--channel-id", default=None, help="Only count messages from this channel")
@click.option("--json", "-j", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def trends(ctx: click.Context, days: int, channel_id: str | None, json_output: bool) -> None:
    """Show mood trends over the last N days.

    **Examples:**

        moodrelay trends

        moodrelay trends --days 30 --channel-id support
    """
    result = _run(_load_config(ctx), lambda client: client.get_trends(days, channel_id))
    if json_output or not isinstance(result, dict):
        output_json(result)
    else:
        print_fields(result, list(result))


def _require_object(result: object) -> dict:
    if not isinstance(result, dict):
        kind = type(result).__name__
        error_exit(f"Unexpected response from backend: expected a JSON object, got {kind}")
    return result


def _load_config(ctx: click.Context) -> BackendClientConfig:
    try:
        config = BackendClientConfig.from_env(base_url=ctx.obj["base_url"])
        if ctx.obj["timeout"] is not None:
            config = dataclasses.replace(config, timeout=ctx.obj["timeout"])
    except MoodRelayError as e:
        error_exit(str(e))
    return config


def _run(
    config: BackendClientConfig,
    operation: Callable[[BackendClient], Awaitable[T]],
) -> T:
    """Run one client operation on a fresh connection."""

    async def run() -> T:
        async with BackendClient(config) as client:
            return await operation(client)

    try:
        return asyncio.run(run())
    except MoodRelayError as e:
        error_exit(str(e))
