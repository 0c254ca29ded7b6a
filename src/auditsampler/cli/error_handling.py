"""CLI error handling helpers."""

import click

from auditsampler.domain.errors import DomainError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError | OSError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def echo_warnings(warnings) -> None:
    """Render parse warnings on stderr."""
    for warning in warnings:
        click.echo(f"Warning: {warning}", err=True)
