"""Ledger inspection command."""

from dataclasses import fields

import click

from auditsampler.cli.error_handling import echo_warnings, handle_domain_error
from auditsampler.domain.errors import DomainError
from auditsampler.domain.sampling import group_by_account


@click.command("inspect")
@click.argument("ledger_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def inspect_ledger(ctx, ledger_file: str):
    """Show how a ledger file will be read."""
    import_service = ctx.obj["import_service"]

    try:
        parsed = import_service.load(ledger_file)
    except (DomainError, FileNotFoundError) as e:
        handle_domain_error(ctx, e)

    echo_warnings(parsed.warnings)
    click.echo(f"Layout: {parsed.layout.value}")

    if parsed.column_mapping is not None:
        click.echo("Column mapping:")
        for field in fields(parsed.column_mapping):
            column = getattr(parsed.column_mapping, field.name)
            click.echo(f"  {field.name:<16} {column if column is not None else '(not found)'}")

    accounts = group_by_account(parsed.transactions)
    click.echo(f"Transactions: {len(parsed.transactions)}")
    click.echo(f"Accounts: {len(accounts)}")


def register_commands(cli):
    """Register inspect command with main CLI."""
    cli.add_command(inspect_ledger)
