"""CLI tools for Stowline administration."""

import click

from stowline.db.enums import AdminRole, StorageUnitStatus
from stowline.db.models import Admin, StorageUnit
from stowline.db.session import SessionLocal


@click.group()
def cli():
    """Stowline CLI tools."""
    pass


@cli.command()
@click.option("--email", required=True, help="Admin email address (login)")
@click.option("--name", default=None, help="Display name")
@click.option(
    "--role",
    type=click.Choice([r.value for r in AdminRole]),
    default=AdminRole.ADMIN.value,
    show_default=True,
)
def create_admin(email: str, name: str | None, role: str):
    """
    Create an admin account.

    The admin logs in with a code emailed to this address.

    Example:
        stowline create-admin --email ops@example.com --role SUPERADMIN
    """
    db = SessionLocal()
    try:
        email = email.strip().lower()
        existing = db.query(Admin).filter(Admin.email == email).first()
        if existing:
            click.echo(f"❌ Admin {email} already exists")
            return

        admin = Admin(email=email, name=name, role=role)
        db.add(admin)
        db.commit()
        click.echo(f"✅ Created admin {email} ({role}) id={admin.id}")
    finally:
        db.close()


@cli.command()
@click.option("--prefix", required=True, help="Unit number prefix, e.g. 'A'")
@click.option("--count", type=int, required=True, help="How many units to create")
@click.option("--start", type=int, default=1, show_default=True, help="First unit number")
def seed_storage_units(prefix: str, count: int, start: int):
    """
    Create empty storage units PREFIX-001, PREFIX-002, ...

    Existing unit numbers are skipped.
    """
    if count < 1:
        click.echo("❌ Count must be at least 1")
        return

    db = SessionLocal()
    try:
        created = 0
        for n in range(start, start + count):
            number = f"{prefix}-{n:03d}"
            if db.query(StorageUnit.id).filter(StorageUnit.storage_unit_number == number).first():
                continue
            db.add(StorageUnit(storage_unit_number=number, status=StorageUnitStatus.EMPTY.value))
            created += 1
        db.commit()
        click.echo(f"✅ Created {created} storage units ({count - created} already existed)")
    finally:
        db.close()


if __name__ == "__main__":
    cli()
