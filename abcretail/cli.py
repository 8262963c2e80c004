"""
ABC Retail Storage Console Command-Line Interface

Provides commands to start the web console and inspect its configuration.

Author: ABC Retail Platform Team
Date: 2025
"""

import json
import logging
import os
import sys
from pathlib import Path
from typing import Optional

import click
import uvicorn

from . import __version__
from .core.config_manager import ConfigManager
from .core.logging_config import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="abcretail")
@click.pass_context
def cli(ctx):
    """
    ABC Retail Storage Console

    Manage customer profiles, product images, contracts and order events
    stored in Azure Storage from the browser.
    """
    ctx.ensure_object(dict)


@cli.command()
@click.option(
    "--host",
    default=None,
    help="Host to bind to (default: from configuration, 127.0.0.1)",
)
@click.option(
    "--port",
    default=None,
    help="Port to bind to (default: from configuration, 8000)",
    type=int,
)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file (YAML or JSON)",
)
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    help="Logging level (default: from configuration, INFO)",
)
@click.option(
    "--reload",
    is_flag=True,
    help="Enable auto-reload on code changes (development mode)",
)
def start(host: Optional[str], port: Optional[int], config: Optional[Path], log_level: Optional[str], reload: bool):
    """
    Start the web console.

    Examples:
        abcretail start
        abcretail start --port 8080
        abcretail start --config settings.yaml --log-level DEBUG
    """
    overrides = {}
    if host:
        overrides.setdefault("server", {})["host"] = host
    if port:
        overrides.setdefault("server", {})["port"] = port
    if log_level:
        overrides.setdefault("logging", {})["level"] = log_level.upper()

    app_config = ConfigManager().load(
        config_file=str(config) if config else None,
        cli_overrides=overrides or None,
    )
    setup_logging(
        level=app_config.logging.level,
        format_type=app_config.logging.format,
        log_file=app_config.logging.file,
        rotation_size=app_config.logging.rotation_size,
        rotation_count=app_config.logging.rotation_count,
        module_levels=app_config.logging.module_levels,
    )
    logger = logging.getLogger("abcretail.cli")

    if not app_config.azure_storage.connection_string:
        click.echo(
            "[ERROR] Azure Storage connection string not found. "
            "Set AZURE_STORAGE_CONNECTION_STRING or azure_storage.connection_string.",
            err=True,
        )
        sys.exit(1)

    server = app_config.server
    click.echo(f"Starting ABC Retail Storage Console v{__version__}")
    click.echo(f"Host: {server.host}:{server.port}")
    if config:
        click.echo(f"Config: {config}")
    click.echo(f"Log Level: {app_config.logging.level}")
    click.echo()

    try:
        if reload:
            # Reload mode needs an import string; the factory reloads config itself
            if config:
                os.environ["ABCRETAIL_CONFIG"] = str(config)
            uvicorn.run(
                "abcretail.app:create_app",
                host=server.host,
                port=server.port,
                log_level=app_config.logging.level.lower(),
                reload=True,
                factory=True,
            )
        else:
            from .app import create_app

            uvicorn.run(
                create_app(app_config),
                host=server.host,
                port=server.port,
                log_level=app_config.logging.level.lower(),
                access_log=True,
            )
    except KeyboardInterrupt:
        click.echo("\nShutting down...")
    except Exception as e:
        logger.error(f"Server stopped with error: {e}", exc_info=True)
        click.echo(f"[ERROR] Error starting console: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file (YAML or JSON)",
)
def config(config: Optional[Path]):
    """
    Show the active configuration.

    The connection string account key is redacted.
    """
    app_config = ConfigManager().load(config_file=str(config) if config else None)
    click.echo(json.dumps(app_config.redacted_dump(), indent=2))


@cli.command()
def version():
    """Show the console version."""
    click.echo(f"ABC Retail Storage Console version {__version__}")


def main():
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
