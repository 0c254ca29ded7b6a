"""CLI options and validation for sampling settings."""

import click

from auditsampler.domain.entities import SamplingConfig
from auditsampler.domain.errors import ValidationError, invalid_config_value
from auditsampler.utils.amount_parser import parse_amount

DEFAULT_TOLERABLE_MISSTATEMENT = "15000"
DEFAULT_TESTING_SCOPE = "11000"
DEFAULT_SAMPLE_SIZE = 3


def parse_keywords(raw: str | None) -> tuple[str, ...]:
    """Split a comma-separated keyword list.

    Keywords are trimmed and upper-cased; blanks and repeats are dropped,
    first occurrence wins.
    """
    if not raw:
        return ()
    keywords: list[str] = []
    for part in raw.split(","):
        keyword = part.strip().upper()
        if keyword and keyword not in keywords:
            keywords.append(keyword)
    return tuple(keywords)


def build_sampling_config(
    tolerable_misstatement: str,
    testing_scope: str,
    sample_size: int,
    keywords: str | None = None,
) -> SamplingConfig:
    """Build a validated SamplingConfig from raw CLI values.

    Raises:
        ValidationError: If an amount cannot be parsed or a value is out of range
    """
    try:
        tm = parse_amount(tolerable_misstatement)
    except ValueError as e:
        raise ValidationError(f"Invalid tolerable misstatement: {e}")
    if tm <= 0:
        raise ValidationError(
            invalid_config_value("tolerable misstatement", tolerable_misstatement, "greater than 0")
        )

    try:
        scope = parse_amount(testing_scope)
    except ValueError as e:
        raise ValidationError(f"Invalid testing scope: {e}")
    if scope < 0:
        raise ValidationError(
            invalid_config_value("testing scope", testing_scope, "0 or greater")
        )

    if sample_size < 1:
        raise ValidationError(invalid_config_value("sample size", sample_size, "at least 1"))

    return SamplingConfig(
        tolerable_misstatement=tm,
        testing_scope=scope,
        sample_size=sample_size,
        target_keywords=parse_keywords(keywords),
    )


def sampling_options(command):
    """Attach the sampling settings options to a click command."""
    options = [
        click.option(
            "--tm",
            "tolerable_misstatement",
            default=DEFAULT_TOLERABLE_MISSTATEMENT,
            show_default=True,
            envvar="AUDITSAMPLER_TOLERABLE_MISSTATEMENT",
            help="Tolerable misstatement: accounts above this balance are material",
        ),
        click.option(
            "--scope",
            "testing_scope",
            default=DEFAULT_TESTING_SCOPE,
            show_default=True,
            envvar="AUDITSAMPLER_TESTING_SCOPE",
            help="Testing scope: transactions above this amount are taken first",
        ),
        click.option(
            "--sample-size",
            type=int,
            default=DEFAULT_SAMPLE_SIZE,
            show_default=True,
            envvar="AUDITSAMPLER_SAMPLE_SIZE",
            help="Maximum samples per material account",
        ),
        click.option(
            "--keywords",
            envvar="AUDITSAMPLER_KEYWORDS",
            help="Comma-separated account name keywords (e.g., 'PARK, UTILITIES'); empty means all accounts",
        ),
    ]
    for option in reversed(options):
        command = option(command)
    return command
