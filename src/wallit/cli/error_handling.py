"""CLI error handling helpers."""

import click

from wallit.domain.errors import DomainError, ExchangeRateUnavailableError

# Everything a ledger operation is expected to raise
LEDGER_ERRORS = (DomainError, ExchangeRateUnavailableError)


def handle_domain_error(ctx: click.Context, error: DomainError | ExchangeRateUnavailableError) -> None:
    """Render a ledger error and exit with failure."""
    message = f"Error: {error}"
    if getattr(error, "retryable", False):
        message += " (try again later)"
    click.echo(message, err=True)
    ctx.exit(1)
