import asyncio
import os

import click
from dotenv import load_dotenv

from .logging_config import log_operation, setup_logger

__version__ = "0.1.0"


@click.command()
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase verbosity (can be used multiple times)",
)
@click.option(
    "--env-file", type=click.Path(exists=True, dir_okay=False), help="Path to .env file"
)
@click.option(
    "--transport",
    type=click.Choice(["stdio", "sse"]),
    default="stdio",
    envvar="MCP_TRANSPORT",
    help="Transport type (stdio or sse)",
)
@click.option(
    "--port",
    default=8000,
    envvar="MCP_PORT",
    help="Port to listen on for SSE transport",
)
@click.option(
    "--log-dir",
    help="Directory to store log files",
)
@click.option(
    "--dry-run/--no-dry-run",
    default=None,
    help="Skip the Jira connectivity check on startup",
)
@click.option(
    "--jira-url",
    help="Jira URL (e.g., https://your-domain.atlassian.net)",
)
@click.option("--jira-email", help="Jira account email")
@click.option("--jira-token", help="Jira API token")
def main(
    verbose: int,
    env_file: str | None,
    transport: str,
    port: int,
    log_dir: str | None,
    dry_run: bool | None,
    jira_url: str | None,
    jira_email: str | None,
    jira_token: str | None,
) -> None:
    """MCP Jira Server - Jira Cloud functionality for MCP"""
    # Load environment variables from file if specified, otherwise try default .env
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    logging_level = os.getenv("LOG_LEVEL", "INFO")
    if verbose == 1:
        logging_level = "INFO"
    elif verbose >= 2:
        logging_level = "DEBUG"

    logger = setup_logger(name="mcp-jira", level=logging_level, log_dir=log_dir)

    with log_operation(logger, "application_startup", app_version=__version__):
        if env_file:
            logger.info(f"Loaded environment from file: {env_file}")

        # Command line arguments override the environment
        if jira_url:
            os.environ["JIRA_BASE_URL"] = jira_url
        if jira_email:
            os.environ["JIRA_EMAIL"] = jira_email
        if jira_token:
            os.environ["JIRA_API_TOKEN"] = jira_token
        if dry_run is not None:
            os.environ["MCP_DRY_RUN"] = str(dry_run).lower()

        from .servers import run_server

        logger.info(f"Starting MCP Jira v{__version__} with {transport} transport")

    asyncio.run(run_server(transport=transport, port=port))


__all__ = ["main", "__version__", "setup_logger", "log_operation"]

if __name__ == "__main__":
    main()
