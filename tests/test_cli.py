"""Tests for the onepass command line."""

import pytest
from typer.testing import CliRunner

from onepass import __version__
from onepass import cli
from onepass.cli import Session, app
from onepass.config import PASSWORD_ENV

PW = "masterPassword"

runner = CliRunner()


@pytest.fixture
def vault_path(tmp_path):
    return tmp_path / "vault" / "main.txt"


@pytest.fixture
def invoke(vault_path, monkeypatch):
    monkeypatch.setenv(PASSWORD_ENV, PW)

    def _invoke(*args, input=None):
        return runner.invoke(app, ["--location", str(vault_path), *args], input=input)

    return _invoke


@pytest.fixture
def initialized(invoke):
    result = invoke("init")
    assert result.exit_code == 0, result.output
    return invoke


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_init_creates_vault(invoke, vault_path):
    result = invoke("init")
    assert result.exit_code == 0, result.output
    assert "Vault created" in result.output
    assert vault_path.exists()


def test_init_twice_fails(initialized):
    result = initialized("init")
    assert result.exit_code == 1
    assert "already exists" in result.output


def test_commands_require_a_vault(invoke):
    result = invoke("list")
    assert result.exit_code == 1
    assert "No vault found" in result.output


def test_list_empty_vault(initialized):
    result = initialized("list")
    assert result.exit_code == 0, result.output
    assert "No resources saved" in result.output


def test_new_list_get(initialized):
    result = initialized("new", "twitter", "--user", "u@x.com", "--generate")
    assert result.exit_code == 0, result.output
    assert "twitter" in result.output

    result = initialized("list")
    assert result.exit_code == 0, result.output
    assert "twitter" in result.output

    result = initialized("get", "twitter")
    assert result.exit_code == 0, result.output
    assert "u@x.com" in result.output


def test_new_duplicate_fails(initialized):
    initialized("new", "twitter", "-u", "a", "-g")
    result = initialized("new", "twitter", "-u", "b", "-g")
    assert result.exit_code == 1
    assert "already exists" in result.output


def test_new_reserved_name_fails(initialized):
    result = initialized("new", "resource", "-u", "a", "-g")
    assert result.exit_code == 1
    assert "reserved keyword" in result.output


def test_update_password_and_show(initialized):
    initialized("new", "github", "-u", "alice", "-g")
    result = initialized("update", "github", "--field", "password", "--value", "n3w-secret")
    assert result.exit_code == 0, result.output
    assert "updated" in result.output

    result = initialized("get", "github", "--show")
    assert result.exit_code == 0, result.output
    assert "n3w-secret" in result.output


def test_update_user_with_prompted_field(initialized):
    initialized("new", "github", "-u", "alice", "-g")
    result = initialized("update", "github", "--value", "bob", input="u\n")
    assert result.exit_code == 0, result.output

    result = initialized("get", "github")
    assert "bob" in result.output


def test_update_missing_fails(initialized):
    result = initialized("update", "missing", "--field", "user", "--value", "x")
    assert result.exit_code == 1
    assert "No resource named" in result.output


def test_delete(initialized):
    initialized("new", "a", "-u", "x", "-g")
    initialized("new", "b", "-u", "y", "-g")
    result = initialized("del", "a", "--yes")
    assert result.exit_code == 0, result.output

    result = initialized("get", "a")
    assert result.exit_code == 1
    result = initialized("get", "b")
    assert result.exit_code == 0


def test_delete_declined_keeps_resource(initialized):
    initialized("new", "a", "-u", "x", "-g")
    result = initialized("del", "a", input="n\n")
    assert result.exit_code == 0
    assert initialized("get", "a").exit_code == 0


def test_wrong_password_fails(initialized, monkeypatch):
    monkeypatch.setenv(PASSWORD_ENV, "wrongPassword")
    result = initialized("list")
    assert result.exit_code == 1
    assert "Incorrect password" in result.output


def test_password_with_space_fails(invoke, monkeypatch, vault_path):
    monkeypatch.setenv(PASSWORD_ENV, "has space")
    result = invoke("init")
    assert result.exit_code == 1
    assert "cannot contain spaces" in result.output
    assert not vault_path.exists()


def test_purge(initialized, vault_path):
    result = initialized("purge", "--yes")
    assert result.exit_code == 0, result.output
    assert not vault_path.exists()


def test_info(initialized):
    result = initialized("info")
    assert result.exit_code == 0, result.output
    assert "yes" in result.output


def test_suggest_several():
    result = runner.invoke(app, ["suggest", "--length", "20", "--count", "3"])
    assert result.exit_code == 0, result.output
    assert "  3." in result.output
    assert "  4." not in result.output


def test_suggest_too_short_fails():
    result = runner.invoke(app, ["suggest", "--length", "2"])
    assert result.exit_code == 1


def test_new_with_too_short_generated_password_fails(initialized):
    result = initialized("new", "x", "-u", "bob", "-g", "--length", "2")
    assert result.exit_code == 1
    assert not isinstance(result.exception, ValueError)
    assert "at least 4" in result.output
    assert initialized("get", "x").exit_code == 1


def test_update_with_value_does_not_echo_password(initialized):
    initialized("new", "github", "-u", "alice", "-g")
    initialized("update", "github", "-f", "password", "--value", "kn0wn-secret")
    result = initialized("update", "github", "-f", "user", "--value", "bob", "-g")
    assert result.exit_code == 0, result.output
    assert "kn0wn-secret" not in result.output
    assert "New password" not in result.output


def test_update_generated_password_is_shown(initialized):
    initialized("new", "github", "-u", "alice", "-g")
    result = initialized("update", "github", "-f", "password", "-g")
    assert result.exit_code == 0, result.output
    assert "New password" in result.output


def test_suggest_length_short_flag_does_not_clash_with_location(invoke):
    result = invoke("suggest", "-n", "20", "--count", "2")
    assert result.exit_code == 0, result.output
    assert "  2." in result.output


# ---------------------------------------------------------------------------
# Clipboard
# ---------------------------------------------------------------------------


def test_clipboard_cleared_when_prompt_is_interrupted(tmp_path, monkeypatch):
    copies = []
    monkeypatch.setattr(cli.pyperclip, "copy", copies.append)

    def interrupted(*args, **kwargs):
        raise SystemExit(130)

    monkeypatch.setattr(cli, "_ask", interrupted)

    with pytest.raises(SystemExit):
        cli._copy_to_clipboard(Session(path=tmp_path / "main.txt"), "s3cret")
    assert copies == ["s3cret", ""]


def test_clipboard_cleared_after_enter(tmp_path, monkeypatch):
    copies = []
    monkeypatch.setattr(cli.pyperclip, "copy", copies.append)
    monkeypatch.setattr(cli, "_ask", lambda *args, **kwargs: "")

    cli._copy_to_clipboard(Session(path=tmp_path / "main.txt"), "s3cret")
    assert copies == ["s3cret", ""]
