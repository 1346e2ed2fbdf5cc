"""Tests for the flask CLI commands."""

from datetime import timedelta

from printdesk.models import JobStatus
from printdesk.store import job_store, user_store


def test_seed_operators(app):
    app.config["SEED_OPERATORS"] = "admin:pw1;clerk:pw2"
    runner = app.test_cli_runner()

    result = runner.invoke(args=["seed-operators"])

    assert result.exit_code == 0
    assert "Seeded 2 of 2 operators" in result.output
    with app.app_context():
        assert user_store.get_by_username("clerk").check_password("pw2")


def test_seed_operators_empty(app):
    result = app.test_cli_runner().invoke(args=["seed-operators"])

    assert result.exit_code == 0
    assert "nothing to seed" in result.output


def test_seed_operators_malformed(app):
    app.config["SEED_OPERATORS"] = "admin"

    result = app.test_cli_runner().invoke(args=["seed-operators"])

    assert result.exit_code != 0


def test_create_operator(app):
    runner = app.test_cli_runner()

    result = runner.invoke(args=["create-operator", "desk", "--password", "s3cret"])

    assert result.exit_code == 0
    with app.app_context():
        assert user_store.get_by_username("desk").check_password("s3cret")

    duplicate = runner.invoke(args=["create-operator", "desk", "--password", "other"])
    assert duplicate.exit_code != 0


def test_sweep_command(app, make_job):
    with app.app_context():
        job_id = make_job(status=JobStatus.PENDING, age=timedelta(hours=3)).id

    result = app.test_cli_runner().invoke(args=["sweep"])

    assert result.exit_code == 0
    assert "Deleted 1 files, expired 1 jobs" in result.output
    with app.app_context():
        assert job_store.get(job_id).status == JobStatus.EXPIRED


def test_init_db_is_idempotent(app):
    result = app.test_cli_runner().invoke(args=["init-db"])

    assert result.exit_code == 0
    assert "Database tables created" in result.output
