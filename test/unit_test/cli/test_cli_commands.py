"""Unit tests for the ``commerflow`` command line."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from click.testing import CliRunner

from commerflow.cli.main import cli
from commerflow.cli.smoke import CheckResult
from commerflow.cli.tasks import SAMPLE_CATEGORIES, SAMPLE_PRODUCTS


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path}/cli.db"


@pytest.fixture
def invoke(runner, database_url):
    def _invoke(*args, **kwargs):
        return runner.invoke(cli, ["--database-url", database_url, *args], **kwargs)

    return _invoke


class TestDatabaseCommands:
    def test_init_db_then_check_db(self, invoke):
        assert invoke("init-db").exit_code == 0

        result = invoke("check-db")

        assert result.exit_code == 0, result.output
        assert "Database connection OK" in result.output
        assert "products" in result.output

    def test_check_db_without_tables_fails(self, invoke):
        result = invoke("check-db")

        assert result.exit_code == 1
        assert "database check failed" in result.output

    def test_seed_is_idempotent(self, invoke):
        first = invoke("seed")
        second = invoke("seed")

        assert first.exit_code == 0, first.output
        assert f"Categories created: {len(SAMPLE_CATEGORIES)}" in first.output
        assert f"Products created: {len(SAMPLE_PRODUCTS)}" in first.output

        assert second.exit_code == 0, second.output
        assert "Categories created: 0" in second.output
        assert "Products created: 0" in second.output
        assert "already exists, skipped" in second.output

    def test_seed_clean_removes_unordered_products(self, invoke):
        invoke("seed")

        result = invoke("seed", "--clean")

        assert result.exit_code == 0, result.output
        assert f"Removed {len(SAMPLE_PRODUCTS)} unordered products" in result.output
        assert f"Products created: {len(SAMPLE_PRODUCTS)}" in result.output


class TestAccountCommands:
    def test_create_admin_then_promote(self, invoke):
        created = invoke("create-admin", "--email", "root@commerflow.dev", "--password", "secret123", "--name", "Root")
        again = invoke("create-admin", "--email", "ROOT@commerflow.dev")

        assert created.exit_code == 0, created.output
        assert "Admin user created" in created.output
        assert again.exit_code == 0, again.output
        assert "already exists" in again.output
        assert "ADMIN" in again.output

    def test_list_users(self, invoke):
        invoke("init-db")
        assert "No users found." in invoke("list-users").output

        invoke("create-admin", "--email", "root@commerflow.dev", "--password", "secret123")
        result = invoke("list-users")

        assert result.exit_code == 0, result.output
        assert "root@commerflow.dev" in result.output

    def test_reset_password(self, invoke):
        invoke("create-admin", "--email", "root@commerflow.dev", "--password", "secret123")

        result = invoke("reset-password", "root@commerflow.dev", "--password", "brand-new-pass")

        assert result.exit_code == 0, result.output
        assert "Password updated for" in result.output

    def test_reset_password_prompts(self, invoke):
        invoke("create-admin", "--email", "root@commerflow.dev", "--password", "secret123")

        result = invoke("reset-password", "root@commerflow.dev", input="brand-new-pass\nbrand-new-pass\n")

        assert result.exit_code == 0, result.output

    def test_reset_password_unknown_email(self, invoke):
        invoke("init-db")

        result = invoke("reset-password", "ghost@commerflow.dev", "--password", "secret123")

        assert result.exit_code == 1
        assert "no user with email" in result.output

    def test_reset_password_too_short(self, invoke):
        result = invoke("reset-password", "root@commerflow.dev", "--password", "123")

        assert result.exit_code == 1
        assert "at least 6 characters" in result.output


class TestGenerateEnv:
    @pytest.mark.parametrize("preset", ["dev", "prod", "test"])
    def test_writes_preset(self, runner, tmp_path, preset):
        output = tmp_path / ".env"

        result = runner.invoke(cli, ["generate-env", preset, "--output", str(output)])

        assert result.exit_code == 0, result.output
        content = output.read_text()
        assert f"CommerFlow Environment Configuration ({preset})" in content
        assert "JWT_SECRET=" in content

    def test_refuses_to_overwrite(self, runner, tmp_path):
        output = tmp_path / ".env"
        output.write_text("KEEP=1\n")

        result = runner.invoke(cli, ["generate-env", "dev", "--output", str(output)])

        assert result.exit_code == 1
        assert output.read_text() == "KEEP=1\n"

    def test_force_overwrites(self, runner, tmp_path):
        output = tmp_path / ".env"
        output.write_text("KEEP=1\n")

        result = runner.invoke(cli, ["generate-env", "test", "--output", str(output), "--force"])

        assert result.exit_code == 0, result.output
        assert "KEEP=1" not in output.read_text()


class TestSmokeCommand:
    def test_all_checks_pass(self, runner):
        results = [CheckResult("health", True, "HTTP 200")]
        with patch("commerflow.cli.main.run_smoke", return_value=results) as mock_smoke:
            result = runner.invoke(cli, ["smoke", "--base-url", "http://mock", "--email", "a@b.c", "--password", "pw"])

        assert result.exit_code == 0, result.output
        mock_smoke.assert_called_once_with("http://mock", "a@b.c", "pw")
        assert "PASS" in result.output

    def test_failed_check_exits_non_zero(self, runner):
        results = [CheckResult("health", False, "HTTP 503")]
        with patch("commerflow.cli.main.run_smoke", return_value=results):
            result = runner.invoke(cli, ["smoke", "--base-url", "http://mock"])

        assert result.exit_code == 1
        assert "FAIL" in result.output
