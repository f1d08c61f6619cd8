"""Main CLI entry point for kubeconn."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.markup import escape

from kubeconn import __version__
from kubeconn.core.exceptions import KubeconnError

if TYPE_CHECKING:
    from kubeconn.core.config import KubeconnConfig

console = Console(stderr=True)


class KubeconnContext:
    """Shared context for CLI commands with lazy initialization."""

    def __init__(self, config_path: str | None):
        """Initialize context with config path.

        Args:
            config_path: Path to configuration file, or None for defaults
        """
        self.config_path = config_path
        self._config: KubeconnConfig | None = None

    @property
    def config(self) -> KubeconnConfig:
        """Get or create config lazily."""
        if self._config is None:
            from kubeconn.core.config import KubeconnConfig

            if self.config_path:
                self._config = KubeconnConfig.from_file(self.config_path)
            else:
                self._config = KubeconnConfig()
        return self._config


def _fail(error: KubeconnError) -> None:
    console.print(f"[red]Error: {escape(str(error))}[/red]", highlight=False, soft_wrap=True)
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to configuration file",
)
@click.pass_context
def cli(ctx: click.Context, config: str | None) -> None:
    """Resolve kubeconfig files into connection parameters and back."""
    ctx.obj = KubeconnContext(config_path=config)

    try:
        from kubeconn.utils.logging import setup_logging

        logging_config = ctx.obj.config.logging
        setup_logging(
            level=logging_config.level,
            format=logging_config.format,
            output="stderr",
        )
    except KubeconnError as e:
        _fail(e)


@cli.command()
@click.argument("kubeconfig", type=click.Path(dir_okay=False))
@click.option(
    "--inline-files/--no-inline-files",
    default=None,
    help="Read CA, certificate and key files into the connection",
)
@click.option("--output", type=click.Choice(["yaml", "json"]), default="yaml")
@click.pass_context
def resolve(ctx: click.Context, kubeconfig: str, inline_files: bool | None, output: str) -> None:
    """Print the connection parameters of a kubeconfig's current context."""
    from kubeconn.kubeconfig.resolver import resolve as resolve_kubeconfig
    from kubeconn.kubeconfig.serialization import load_kubeconfig, render_connection

    if inline_files is None:
        inline_files = ctx.obj.config.resolver.inline_files

    try:
        connection = resolve_kubeconfig(load_kubeconfig(kubeconfig), inline_files=inline_files)
        click.echo(render_connection(connection, output), nl=False)
    except KubeconnError as e:
        _fail(e)


@cli.command()
@click.argument("connection_file", type=click.Path(dir_okay=False))
@click.option("--output", type=click.Choice(["yaml", "json"]), default="yaml")
def build(connection_file: str, output: str) -> None:
    """Print a single-context kubeconfig for a connection parameters file."""
    from kubeconn.kubeconfig.builder import build as build_kubeconfig
    from kubeconn.kubeconfig.serialization import load_connection, render_kubeconfig

    try:
        kubeconfig = build_kubeconfig(load_connection(connection_file))
        click.echo(render_kubeconfig(kubeconfig, output), nl=False)
    except KubeconnError as e:
        _fail(e)


@cli.command()
@click.argument("connection_file", type=click.Path(dir_okay=False))
def validate(connection_file: str) -> None:
    """Validate a connection parameters file."""
    from kubeconn.kubeconfig.serialization import load_connection

    try:
        connection = load_connection(connection_file)
    except KubeconnError as e:
        _fail(e)
        return

    console.print(
        f"[green]✓ Connection to {connection.host} is valid[/green]", highlight=False, soft_wrap=True
    )


if __name__ == "__main__":
    cli()
