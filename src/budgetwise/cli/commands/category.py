"""Category management commands."""

import click
from budgetwise.cli.error_handling import handle_domain_error
from budgetwise.domain.category import DEFAULT_ICON, CategoryService

TYPE_CHOICE = click.Choice(["income", "expense", "general"], case_sensitive=False)


@click.group()
def category_group():
    """Manage transaction categories."""
    pass


def _resolve_category_or_exit(ctx, service: CategoryService, category: str) -> int:
    try:
        return int(category)
    except ValueError:
        pass

    found = service.get_category_by_name(category)
    if found is None:
        click.echo(f"Error: Category '{category}' not found", err=True)
        ctx.exit(1)
    return found.id


@category_group.command("list")
@click.option("--type", "category_type", type=TYPE_CHOICE, help="Only show one type")
@click.pass_context
def list_categories(ctx, category_type: str | None):
    """List categories."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    categories = service.list_categories(type=category_type.lower() if category_type else None)
    if not categories:
        click.echo("No categories found. Run 'budgetwise init-categories' to add the defaults.")
        return

    click.echo(f"\n{'ID':<6} {'Name':<24} {'Type':<10} {'Icon':<16} Color")
    click.echo("-" * 66)
    for cat in categories:
        click.echo(
            f"{cat.id:<6} {cat.name[:24]:<24} {cat.type.value:<10} {cat.icon[:16]:<16} {cat.color or ''}"
        )


@category_group.command("create")
@click.argument("name")
@click.option(
    "--type", "category_type", type=TYPE_CHOICE, default="expense", show_default=True
)
@click.option("--icon", default=DEFAULT_ICON, show_default=True, help="Icon name")
@click.option("--color", help="Display color")
@click.pass_context
def create_category(ctx, name: str, category_type: str, icon: str, color: str | None):
    """Create a category.

    Examples:
        budgetwise category create "Pets"
        budgetwise category create "Bonus" --type income --icon Award
    """
    db = ctx.obj["db"]
    service = CategoryService(db)

    try:
        category_id = service.create_category(
            name=name, type=category_type.lower(), icon=icon, color=color
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created category '{name.strip()}' (ID: {category_id})")


@category_group.command("edit")
@click.argument("category", metavar="CATEGORY")
@click.option("--name", help="New name (also renames it on existing transactions)")
@click.option("--type", "category_type", type=TYPE_CHOICE, help="New type")
@click.option("--icon", help="New icon")
@click.option("--color", help="New color")
@click.pass_context
def edit_category(
    ctx,
    category: str,
    name: str | None,
    category_type: str | None,
    icon: str | None,
    color: str | None,
):
    """Edit a category.

    CATEGORY can be a category name or ID.
    """
    db = ctx.obj["db"]
    service = CategoryService(db)

    if all(v is None for v in (name, category_type, icon, color)):
        click.echo("Error: Nothing to update.", err=True)
        ctx.exit(1)

    category_id = _resolve_category_or_exit(ctx, service, category)

    try:
        renamed = service.update_category(
            category_id,
            name=name,
            type=category_type.lower() if category_type else None,
            icon=icon,
            color=color,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated category {category_id}")
    if renamed:
        click.echo(f"  Renamed on {renamed} transaction(s)")


@category_group.command("delete")
@click.argument("category", metavar="CATEGORY")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_category(ctx, category: str, yes: bool):
    """Delete a category.

    Its transactions are moved to the "Other" category.
    """
    db = ctx.obj["db"]
    service = CategoryService(db)

    category_id = _resolve_category_or_exit(ctx, service, category)
    category_obj = service.get_category(category_id)
    if category_obj is None:
        click.echo(f"Error: Category {category_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(f"Delete category '{category_obj.name}'?"):
        click.echo("Deletion cancelled.")
        return

    try:
        moved = service.delete_category(category_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deleted category '{category_obj.name}'")
    if moved:
        click.echo(f"  Moved {moved} transaction(s) to 'Other'")


@click.command("init-categories")
@click.option("--force", is_flag=True, help="Add missing defaults even if categories exist")
@click.pass_context
def init_categories(ctx, force: bool):
    """Create the default set of categories."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    created, skipped = service.init_default_categories(force=force)
    if created == 0 and not force:
        click.echo("Categories already exist. Use --force to add missing defaults.")
        return
    click.echo(f"Created {created} categories ({skipped} already present)")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
    cli.add_command(init_categories)
