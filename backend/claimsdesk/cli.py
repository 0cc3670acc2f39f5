# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/claimsdesk/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap:
# - python -m flask system init
#   Create the users table and seed the administrator if no user exists.
#
# User inspection/bootstrap:
# - python -m flask users list
#   List all users with role and department.
# - python -m flask users create --username jan --password secret --first-name Jan --last-name Kowalski --department QA
#   Create a user (add --hash to store a bcrypt hash instead of plaintext).
#
# Claims table:
# - python -m flask claims init-table
#   Create the default claims table if it does not exist.
# - python -m flask claims schema
#   Print the introspected columns of the claims table.
# - python -m flask claims next-number [--year 2026]
#   Print the claim number the next create would receive.

from datetime import date

import click
from flask import current_app
from flask.cli import with_appcontext
from sqlalchemy import Column, Integer, MetaData, Table, Text

from .errors import ClaimsError
from .extensions import db
from .models import User
from .services.auth_service import create_user, ensure_default_admin
from .services.claim_number_service import next_claim_number
from .services.claim_store import claims_table_name, open_store
from .services.schema_service import get_schema, resolve_reserved


def default_claims_table(name: str, metadata: MetaData | None = None) -> Table:
    """
    Claims table layout used for fresh installs.

    AUTOINCREMENT keeps SQLite from reusing rowids of deleted claims.
    """
    return Table(
        name,
        metadata or MetaData(),
        Column("id", Integer, primary_key=True),
        Column("claim_number", Text),
        Column("submission_date", Text),
        Column("created_at", Text),
        Column("status", Text),
        Column("reporter", Text),
        Column("department", Text),
        Column("customer", Text),
        Column("product", Text),
        Column("description", Text),
        sqlite_autoincrement=True,
    )


@click.group('system')
def system_group():
    """System bootstrap commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """Create the users table and seed the administrator account."""
    click.echo("START Initializing claims service...")

    db.create_all()
    click.echo("PASS Users table ready")

    admin = ensure_default_admin()
    if admin:
        click.echo(f"PASS Created administrator: {admin.username}")
        click.echo("\nDefault Credentials (CHANGE IN PRODUCTION!):")
        click.echo(f"   {admin.username} -> {current_app.config['ADMIN_PASSWORD']}")
    else:
        click.echo("PASS Users already exist, no administrator seeded")


@click.group('users')
def users_group():
    """User inspection and bootstrap commands."""


@users_group.command('list')
@with_appcontext
def list_users():
    """List all users."""
    users = db.session.query(User).order_by(User.id).all()

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*90)
    click.echo(f"{'ID':<5} {'Username':<20} {'Full name':<30} {'Role':<10} {'Department'}")
    click.echo("="*90)

    for user in users:
        click.echo(f"{user.id:<5} {user.username:<20} {user.full_name:<30} {user.role:<10} {user.department or '-'}")

    click.echo("="*90 + "\n")


@users_group.command('create')
@click.option('--username', prompt=True, help='Login name (unique)')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option('--first-name', default='', help='First name')
@click.option('--last-name', default='', help='Last name')
@click.option('--role', default='user', help='Role ("admin" sees every claim)')
@click.option('--department', default=None, help='Department')
@click.option('--hash', 'hashed', is_flag=True, help='Store a bcrypt hash instead of plaintext')
@with_appcontext
def create_user_cli(username, password, first_name, last_name, role, department, hashed):
    """Create a user."""
    try:
        user = create_user(
            username,
            password,
            first_name=first_name,
            last_name=last_name,
            role=role,
            department=department,
            hashed=hashed,
        )
    except ValueError as e:
        raise click.ClickException(str(e))

    click.echo(f"PASS Created user: {user.username} ({user.full_name or '-'}) with role '{user.role}'")


@click.group('claims')
def claims_group():
    """Claims table commands."""


@claims_group.command('init-table')
@with_appcontext
def init_claims_table():
    """Create the default claims table if it does not exist."""
    name = claims_table_name()
    metadata = MetaData()
    default_claims_table(name, metadata)
    metadata.create_all(db.engine, checkfirst=True)
    click.echo(f"PASS Claims table ready: {name}")


@claims_group.command('schema')
@with_appcontext
def show_schema():
    """Print the introspected columns of the claims table."""
    try:
        with open_store(action="read claims schema") as conn:
            schema = get_schema(conn, claims_table_name())
    except ClaimsError as e:
        raise click.ClickException(str(e))

    click.echo(f"{'Name':<25} {'Type':<15} {'Not null':<9} {'Default':<8} {'PK':<4} {'Required'}")
    for col in schema.columns:
        click.echo(
            f"{col.name:<25} {col.type or '-':<15} {_yes(col.not_null):<9} "
            f"{_yes(col.has_default):<8} {_yes(col.primary_key):<4} {_yes(col.required)}"
        )


@claims_group.command('next-number')
@click.option('--year', type=int, default=None, help='Year (defaults to the current year)')
@with_appcontext
def show_next_number(year):
    """Print the claim number the next create would receive."""
    year = year or date.today().year
    try:
        with open_store(action="read claim numbers") as conn:
            schema = get_schema(conn, claims_table_name())
            column = resolve_reserved(schema, current_app.config).claim_number
            if column is None:
                raise click.ClickException("Claims table has no claim number column")
            number = next_claim_number(
                conn,
                table=schema.table,
                column=column,
                year=year,
                prefix=current_app.config["CLAIM_NUMBER_PREFIX"],
            )
    except ClaimsError as e:
        raise click.ClickException(str(e))

    click.echo(number)


def _yes(flag: bool) -> str:
    return "yes" if flag else "no"


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(claims_group)
