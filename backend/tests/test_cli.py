"""CLI command tests (Flask CliRunner)."""

import json

from salonsync.extensions import db
from salonsync.models import ClockToken, Product, StaffMember


def test_system_init_seeds_once(app):
    runner = app.test_cli_runner()

    result = runner.invoke(args=["system", "init"])
    assert result.exit_code == 0, result.output
    assert "Seeded 5 staff, 9 catalog items" in result.output

    result = runner.invoke(args=["system", "init"])
    assert "Seeded 0 staff, 0 catalog items" in result.output
    assert db.session.query(StaffMember).count() == 5
    assert db.session.query(Product).filter_by(is_retail=True).count() == 3


def test_tokens_issue_and_sweep(app):
    runner = app.test_cli_runner()

    result = runner.invoke(args=["tokens", "issue"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert db.session.get(ClockToken, payload["token"]) is not None

    result = runner.invoke(args=["tokens", "sweep"])
    assert "Removed 0 expired token(s)" in result.output


def test_staff_list(app, stylist):
    result = app.test_cli_runner().invoke(args=["staff", "list"])
    assert "Jessica Stylist" in result.output
    assert "[OUT]" in result.output
