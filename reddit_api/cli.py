"""Command-line interface for the Reddit API client."""

import asyncio
import logging
import logging.config
import sys
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from reddit_api.client import Reddit, RedditBuilder
from reddit_api.config import Config
from reddit_api.errors import RedditError
from reddit_api.monitoring.metrics import PrometheusExporter
from reddit_api.subreddit import SORTS, Subreddit, Subreddits
from reddit_api.user import User

app = typer.Typer(help="Reddit API client - Browse subreddits and users from the command line")

logger = logging.getLogger(__name__)


def setup_logging(log_level: str = "INFO") -> None:
    """
    Set up logging configuration.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    log_dir = Path("logs")
    log_dir.mkdir(exist_ok=True)

    log_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": log_level,
                "formatter": "standard",
                "stream": "ext://sys.stderr",
            },
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "level": log_level,
                "formatter": "standard",
                "filename": "logs/reddit_api.log",
                "maxBytes": 10485760,  # 10 MB
                "backupCount": 5,
                "encoding": "utf8",
            },
        },
        "loggers": {
            "": {
                "handlers": ["console", "file"],
                "level": log_level,
                "propagate": True
            },
            "asyncio": {
                "level": "WARNING",
            },
            "httpx": {
                "level": "WARNING",
            },
            "httpcore": {
                "level": "WARNING",
            },
        }
    }

    logging.config.dictConfig(log_config)


def load_config(config_path: str, env_path: Optional[str]) -> Config:
    """Load and validate configuration, exiting with status 1 if it is invalid."""
    config = Config.from_files(config_path, env_path)

    errors = config.validate()
    if errors:
        for error in errors:
            logger.critical(f"Configuration error: {error}")
        sys.exit(1)

    return config


async def build_client(config: Config) -> Reddit:
    metrics = None
    if config.monitoring.enable_prometheus:
        metrics = PrometheusExporter(port=config.monitoring.prometheus_port)
        metrics.start_server()
    return await RedditBuilder(config, metrics=metrics).build()


async def run_subreddit(config: Config, name: str, sort: str, limit: int) -> None:
    async with await build_client(config) as reddit:
        subreddit = Subreddit(reddit, name)
        listing = await getattr(subreddit, "latest" if sort == "new" else sort)(limit)
        for submission in listing.data.unwrap():
            typer.echo(f"{submission.score}\t{submission.id}\t{submission.title}")


async def run_subreddits(config: Config, query: str, limit: int) -> None:
    async with await build_client(config) as reddit:
        listing = await Subreddits(reddit).search(query, limit)
        for subreddit in listing.data.unwrap():
            typer.echo(f"{subreddit.display_name}\t{subreddit.subscribers}\t{subreddit.title}")


async def run_user(config: Config, name: str, max_items: Optional[int]) -> None:
    async with await build_client(config) as reddit:
        stream = User(reddit, name).items()
        for submission in await stream.collect(max_items):
            typer.echo(f"r/{submission.subreddit}\t{submission.id}\t{submission.title}")
        logger.info(f"Read {stream.pages} page(s) of u/{name}")


async def run_whoami(config: Config) -> None:
    async with await build_client(config) as reddit:
        me = await reddit.login()
        account = await me.me()
        typer.echo(account.name)


def _run(coro) -> None:
    try:
        asyncio.run(coro)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except RedditError as e:
        logger.critical(f"Reddit request failed: {str(e)}")
        sys.exit(1)


@app.command()
def subreddit(
    name: Annotated[str, typer.Argument(help="Subreddit name without the r/ prefix")],
    sort: Annotated[str, typer.Option("--sort", "-s", help=f"Listing sort ({', '.join(SORTS)})")] = "hot",
    limit: Annotated[int, typer.Option("--limit", "-n", help="Number of submissions")] = 25,
    config: Annotated[str, typer.Option("--config", "-c", help="Path to configuration file")] = "config.yaml",
    env: Annotated[Optional[str], typer.Option("--env", help="Path to .env file")] = None,
    loglevel: Annotated[str, typer.Option("--loglevel", "-l", help="Logging level")] = "INFO",
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose output")] = False,
) -> None:
    """List submissions of a subreddit."""
    setup_logging("DEBUG" if verbose else loglevel)

    if sort not in SORTS:
        logger.critical(f"Unknown sort {sort!r}, expected one of {', '.join(SORTS)}")
        sys.exit(1)

    _run(run_subreddit(load_config(config, env), name, sort, limit))


@app.command()
def subreddits(
    query: Annotated[str, typer.Argument(help="Search term")],
    limit: Annotated[int, typer.Option("--limit", "-n", help="Number of subreddits")] = 25,
    config: Annotated[str, typer.Option("--config", "-c", help="Path to configuration file")] = "config.yaml",
    env: Annotated[Optional[str], typer.Option("--env", help="Path to .env file")] = None,
    loglevel: Annotated[str, typer.Option("--loglevel", "-l", help="Logging level")] = "INFO",
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose output")] = False,
) -> None:
    """Search subreddits by name."""
    setup_logging("DEBUG" if verbose else loglevel)
    _run(run_subreddits(load_config(config, env), query, limit))


@app.command()
def user(
    name: Annotated[str, typer.Argument(help="Username without the u/ prefix")],
    max_items: Annotated[Optional[int], typer.Option("--max-items", "-m", help="Stop after this many submissions")] = None,
    config: Annotated[str, typer.Option("--config", "-c", help="Path to configuration file")] = "config.yaml",
    env: Annotated[Optional[str], typer.Option("--env", help="Path to .env file")] = None,
    loglevel: Annotated[str, typer.Option("--loglevel", "-l", help="Logging level")] = "INFO",
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose output")] = False,
) -> None:
    """
    Stream every submission of a user.

    Pages are fetched lazily, so --max-items bounds the number of requests.
    """
    setup_logging("DEBUG" if verbose else loglevel)
    _run(run_user(load_config(config, env), name, max_items))


@app.command()
def whoami(
    config: Annotated[str, typer.Option("--config", "-c", help="Path to configuration file")] = "config.yaml",
    env: Annotated[Optional[str], typer.Option("--env", help="Path to .env file")] = None,
    loglevel: Annotated[str, typer.Option("--loglevel", "-l", help="Logging level")] = "INFO",
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose output")] = False,
) -> None:
    """Log in with the configured username and password and print the account name."""
    setup_logging("DEBUG" if verbose else loglevel)
    _run(run_whoami(load_config(config, env)))


if __name__ == "__main__":
    app()
