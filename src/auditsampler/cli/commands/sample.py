"""Sampling command."""

from datetime import date

import click

from auditsampler.cli.error_handling import echo_warnings, handle_domain_error
from auditsampler.cli.sampling_options import build_sampling_config, sampling_options
from auditsampler.domain.errors import DomainError
from auditsampler.domain.sample_export import SampleExportService, default_export_name
from auditsampler.domain.sampling import SamplingService
from auditsampler.utils.formatting import format_currency, format_percentage


def _display_summary(summary) -> None:
    click.echo("\nSampling summary:")
    click.echo(f"  Material accounts: {summary.total_material_accounts}")
    click.echo(f"  Transactions reviewed: {summary.total_transactions_reviewed}")
    click.echo(f"  Total value tested: {format_currency(summary.total_value_tested)}")
    click.echo(
        f"  Coverage: {format_percentage(summary.coverage_percentage)} "
        f"of {format_currency(summary.total_material_balance)}"
    )
    click.echo(
        f"  Samples: {summary.over_scope_count} over scope, "
        f"{summary.high_value_count} high value"
    )


def _display_samples(samples) -> None:
    click.echo(f"\nSelected {len(samples)} sample(s):")
    click.echo("-" * 110)
    click.echo(
        f"{'Account':<30} {'Date':<12} {'Amount':>14}  {'Reason':<20} {'Description':<30}"
    )
    click.echo("-" * 110)

    for sample in samples:
        account = sample.account_group[:30]
        description = (sample.description or "")[:30]
        click.echo(
            f"{account:<30} {sample.date[:12]:<12} {format_currency(sample.amount):>14}  "
            f"{sample.selection_reason.label:<20} {description:<30}"
        )


@click.command("sample")
@click.argument("ledger_file", type=click.Path(exists=True, dir_okay=False))
@sampling_options
@click.option(
    "--export",
    "export_path",
    type=click.Path(dir_okay=False),
    is_flag=False,
    flag_value="",
    help="Write the selected samples to a .csv or .xlsx file "
    "(audit_samples_YYYY-MM-DD.xlsx when no path is given)",
)
@click.pass_context
def sample_ledger(
    ctx,
    ledger_file: str,
    tolerable_misstatement: str,
    testing_scope: str,
    sample_size: int,
    keywords: str | None,
    export_path: str | None,
):
    """Select audit samples from a general-ledger export.

    Examples:
        auditsampler sample ledger.xlsx
        auditsampler sample ledger.csv --tm 15000 --scope 11000 --sample-size 2 --keywords PARK
        auditsampler sample ledger.xlsx --export
    """
    import_service = ctx.obj["import_service"]

    try:
        config = build_sampling_config(
            tolerable_misstatement, testing_scope, sample_size, keywords
        )
        parsed = import_service.load(ledger_file)
    except (DomainError, FileNotFoundError) as e:
        handle_domain_error(ctx, e)

    echo_warnings(parsed.warnings)
    click.echo(
        f"Loaded {len(parsed.transactions)} transactions ({parsed.layout.value} layout)"
    )

    results = SamplingService(config).run(parsed.transactions)
    click.echo(f"Transactions after keyword filter: {results.filtered_transaction_count}")

    if not results.samples:
        click.echo("No material accounts found matching the criteria")
        if export_path is not None:
            click.echo("No samples selected; nothing exported")
        return

    _display_summary(results.summary)
    _display_samples(results.samples)

    if export_path is not None:
        export_path = export_path or default_export_name(date.today())
        try:
            written = SampleExportService().export(results.samples, export_path)
        except (DomainError, OSError) as e:
            handle_domain_error(ctx, e)

        click.echo(f"\nExported {len(results.samples)} samples to {written}")


def register_commands(cli):
    """Register sample command with main CLI."""
    cli.add_command(sample_ledger)
