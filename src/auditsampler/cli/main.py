"""Main CLI entry point."""

import click

from auditsampler.domain.ledger_import import LedgerImportService
from auditsampler.logging_setup import LOG_LEVEL_ENVVAR, configure_logging

# Import and register all commands at module level
from auditsampler.cli.commands import inspect, sample


@click.group()
@click.option(
    "--log-level",
    envvar=LOG_LEVEL_ENVVAR,
    help="Logging level (DEBUG, INFO, WARNING, ...); overrides AUDITSAMPLER_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, log_level: str | None):
    """Auditsampler - General-ledger audit sampling.

    Finds material accounts in a general-ledger export and selects the
    transactions to test in each of them.
    """
    ctx.ensure_object(dict)

    # Only set up logging and services when a command actually runs
    if ctx.invoked_subcommand is not None:
        configure_logging(log_level)
        ctx.obj["import_service"] = LedgerImportService()


# Register all commands
sample.register_commands(cli)
inspect.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
