"""Tests for the stowline admin CLI."""

from click.testing import CliRunner

from stowline.cli import cli
from stowline.db.models import Admin, StorageUnit


def test_create_admin(db):
    runner = CliRunner()
    result = runner.invoke(cli, ["create-admin", "--email", " Ops@Stowline.test ", "--role", "VIEWER"])

    assert result.exit_code == 0, result.output
    admin = db.query(Admin).one()
    assert admin.email == "ops@stowline.test"
    assert admin.role == "VIEWER"


def test_create_admin_existing_email(db, admin):
    result = CliRunner().invoke(cli, ["create-admin", "--email", admin.email])

    assert result.exit_code == 0
    assert "already exists" in result.output
    assert db.query(Admin).count() == 1


def test_seed_storage_units_skips_existing(db):
    runner = CliRunner()
    first = runner.invoke(cli, ["seed-storage-units", "--prefix", "B", "--count", "3"])
    assert first.exit_code == 0, first.output

    second = runner.invoke(cli, ["seed-storage-units", "--prefix", "B", "--count", "5"])
    assert "Created 2 storage units (3 already existed)" in second.output

    numbers = sorted(n for (n,) in db.query(StorageUnit.storage_unit_number).all())
    assert numbers == ["B-001", "B-002", "B-003", "B-004", "B-005"]
    assert {u.status for u in db.query(StorageUnit).all()} == {"Empty"}
