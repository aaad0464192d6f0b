"""Management commands for the document store and user administration"""

import click
from dotenv import load_dotenv
from flask.cli import FlaskGroup

from scholarstream import create_app
from scholarstream.domain.roles import Role
from scholarstream.extensions import get_services

load_dotenv()


def _create_app():
    return create_app()


cli = FlaskGroup(create_app=_create_app)


@cli.command("ensure-indexes")
def ensure_indexes():
    """Create the unique indexes used by the duplicate guards"""
    created = get_services().store.ensure_indexes()
    click.echo(f"Indexes ensured: {', '.join(created)}")


@cli.command("promote-user")
@click.argument("email")
@click.option(
    "--role",
    type=click.Choice([r.value for r in Role]),
    default=Role.ADMIN.value,
    show_default=True,
)
def promote_user(email, role):
    """Set the stored role of an existing user (bootstraps the first Admin)"""
    users = get_services().users
    user = users.get_by_email(email)
    if not user:
        raise click.ClickException(f"No user with email {email}")
    users.set_role(str(user["_id"]), Role(role))
    click.echo(f"{email} is now {role}")


if __name__ == "__main__":
    cli()
