# Overview: Pytest coverage for the Flask CLI bootstrap commands.

from orderhub.models import Item, Login


def test_create_admin_and_seed(app, db_session):
    runner = app.test_cli_runner()

    result = runner.invoke(args=[
        "users", "create",
        "--username", "admin",
        "--email", "admin@orderhub.local",
        "--password", "Password123",
        "--admin",
    ])
    assert result.exit_code == 0, result.output
    assert "PASS Created user: admin" in result.output
    assert db_session.query(Login).filter_by(username="admin").one().is_admin

    result = runner.invoke(args=["inventory", "seed", "--admin-username", "admin"])
    assert result.exit_code == 0, result.output
    assert db_session.query(Item).count() == 5

    # Second run skips existing codes
    result = runner.invoke(args=["inventory", "seed"])
    assert "SKIP" in result.output
    assert db_session.query(Item).count() == 5


def test_create_user_rejects_duplicates(app, db_session):
    runner = app.test_cli_runner()
    args = ["users", "create", "--username", "sam", "--email", "sam@example.com", "--password", "Password123"]

    assert runner.invoke(args=args).exit_code == 0
    result = runner.invoke(args=args)

    assert result.exit_code == 1
    assert "already exists" in result.output


def test_list_users(app, db_session, login_factory):
    login_factory("listed", is_admin=True)

    result = app.test_cli_runner().invoke(args=["users", "list"])

    assert "listed" in result.output
    assert "Admin" in result.output


def test_seed_requires_admin(app, db_session):
    result = app.test_cli_runner().invoke(args=["inventory", "seed", "--admin-username", "ghost"])
    assert result.exit_code == 1
