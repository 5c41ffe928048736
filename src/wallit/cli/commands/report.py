"""Report command."""

import click

from wallit.cli.error_handling import LEDGER_ERRORS, handle_domain_error
from wallit.cli.parsing import parse_date_arg
from wallit.domain.entities import LOCAL_CURRENCY
from wallit.domain.report import ReportService
from wallit.utils.amount_parser import format_money
from wallit.utils.date_parser import local_today


@click.command("report")
@click.option("--start-date", help="First day (defaults to the first day of this month)")
@click.option("--end-date", help="Last day (defaults to today)")
@click.option("--category", "category_id", help="Only this category")
@click.option("--account", "account_id", help="Only this account")
@click.option("--daily", is_flag=True, help="Show income and expense per day")
@click.pass_context
def report(
    ctx,
    start_date: str | None,
    end_date: str | None,
    category_id: str | None,
    account_id: str | None,
    daily: bool,
):
    """Summarize income and expenses over a period.

    Receivables and the payments that settle them are not counted.
    """
    today = local_today(ctx.obj["timezone"])
    start = parse_date_arg(ctx, start_date, "start date") or today.replace(day=1)
    end = parse_date_arg(ctx, end_date, "end date") or today

    try:
        data = ReportService(ctx.obj["db"]).get_report(
            ctx.obj["user_id"], start, end, category_id=category_id, account_id=account_id
        )
    except LEDGER_ERRORS as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nReport {data.start_date.isoformat()} to {data.end_date.isoformat()}")
    click.echo("=" * 50)
    click.echo(f"Income:    {format_money(data.total_income, LOCAL_CURRENCY)}")
    click.echo(f"Expenses:  {format_money(data.total_expense, LOCAL_CURRENCY)}")
    click.echo(f"Net:       {format_money(data.total_income - data.total_expense, LOCAL_CURRENCY)}")
    click.echo(f"Movements: {data.movement_count}")

    if data.category_spending:
        click.echo("\nSpending by category:")
        for item in data.category_spending:
            click.echo(f"  {item.emoji} {item.name:20s} {format_money(item.total, LOCAL_CURRENCY):>20s} ({item.count})")

    if daily and data.daily:
        click.echo("\nDaily:")
        for day in data.daily:
            click.echo(
                f"  {day.date.isoformat()}  +{format_money(day.income, LOCAL_CURRENCY)}"
                f"  -{format_money(day.expense, LOCAL_CURRENCY)}"
            )


def register_commands(cli):
    """Register report command with main CLI."""
    cli.add_command(report)
