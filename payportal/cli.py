import click
from flask.cli import with_appcontext
from payportal.routes.validation import validate_account
from payportal.services.user_service import account_exists, create_user


@click.command('create-admin')
@click.argument('email')
@click.argument('password')
@click.option('--name', default='Portal', show_default=True)
@click.option('--surname', default='Administrator', show_default=True)
@click.option('--id-number', required=True, help='13-digit national ID number')
@with_appcontext
def create_admin_command(email, password, name, surname, id_number):
    """Bootstrap an administrator account."""
    data = {
        'name': name,
        'surname': surname,
        'idNumber': id_number,
        'email': email,
        'password': password,
    }
    error = validate_account(data)
    if error:
        raise click.BadParameter(error)
    if account_exists(email, id_number):
        click.echo(f"Admin {email} already exists")
        return
    create_user(name, surname, id_number, email, password, role='admin')
    click.echo(f"Admin {email} created successfully")
