"""Category management commands."""

import click

from wallit.cli.error_handling import LEDGER_ERRORS, handle_domain_error
from wallit.domain.category import CategoryService


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("create")
@click.argument("name")
@click.argument("emoji")
@click.pass_context
def create_category(ctx, name: str, emoji: str):
    """Create a category.

    Examples:
        wallit category create "Groceries" 🛒
    """
    service = CategoryService(ctx.obj["db"])
    try:
        category = service.create_category(ctx.obj["user_id"], name=name, emoji=emoji)
    except LEDGER_ERRORS as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created category {category.emoji} {category.name} (ID: {category.id})")


@category_group.command("list")
@click.pass_context
def list_categories(ctx):
    """List all categories."""
    service = CategoryService(ctx.obj["db"])
    try:
        categories = service.list_categories(ctx.obj["user_id"])
    except LEDGER_ERRORS as e:
        handle_domain_error(ctx, e)
    if not categories:
        click.echo("No categories found.")
        return
    for cat in categories:
        click.echo(f"{cat.id} | {cat.emoji} {cat.name}")


@category_group.command("delete")
@click.argument("category_id")
@click.pass_context
def delete_category(ctx, category_id: str):
    """Delete a category. Its movements become uncategorized."""
    service = CategoryService(ctx.obj["db"])
    try:
        service.delete_category(ctx.obj["user_id"], category_id)
    except LEDGER_ERRORS as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted category {category_id}")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
