"""CLI commands via click's CliRunner."""

import json

import httpx
import pytest
from click.testing import CliRunner

import cordlink.cli.main as cli_main
from cordlink.client import Cordlink
from cordlink.gateway.client import GatewayClient
from cordlink.transport.http import HttpClient

from fakes import FakeConnector, FakeTimer, RecordingWriter, ScriptedReader, dispatch, hello


def api_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path.endswith("/users/@me/guilds"):
        return httpx.Response(200, json=[{"id": "1", "name": "Rustaceans"}, {"id": "2", "name": "[/red] ops"}])
    if request.method == "GET" and request.url.path.endswith("/channels/10/messages"):
        return httpx.Response(200, json=[{
            "id": "78", "channel_id": "10", "content": "closing tag [/bold] here",
            "author": {"id": "5", "username": "[ferris]"}, "timestamp": "2023-01-01T00:00:00+00:00",
        }])
    if request.method == "POST":
        return httpx.Response(200, json={
            "id": "77", "channel_id": "10", "content": "hi",
            "author": {"id": "5", "username": "ferris"}, "timestamp": "2023-01-01T00:00:00+00:00",
        })
    return httpx.Response(403, json={"message": "Missing Access"})


class FakeCordlink(Cordlink):
    def __init__(self, *frames):
        super().__init__("tok", http=HttpClient("tok", transport=httpx.MockTransport(api_handler)))
        self._frames = frames

    def gateway(self, **kwargs):
        session = (RecordingWriter(), ScriptedReader(*self._frames))
        return GatewayClient("tok", connector=FakeConnector(session), timer=FakeTimer())


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    monkeypatch.setattr(cli_main, "CONFIG_FILE", path)
    monkeypatch.delenv(cli_main.TOKEN_ENV, raising=False)
    return path


class TestAuth:
    def test_login_status_logout(self, config_file):
        runner = CliRunner()
        result = runner.invoke(cli_main.main, ["auth", "login", "--token", " abc "])
        assert result.exit_code == 0
        assert json.loads(config_file.read_text())["token"] == "abc"

        result = runner.invoke(cli_main.main, ["auth", "status"])
        assert "Token configured" in result.output

        runner.invoke(cli_main.main, ["auth", "logout"])
        assert "token" not in json.loads(config_file.read_text())
        result = runner.invoke(cli_main.main, ["auth", "status"])
        assert "No token" in result.output

    def test_env_token_wins(self, config_file, monkeypatch):
        monkeypatch.setenv(cli_main.TOKEN_ENV, "from-env")
        assert cli_main._get_token() == "from-env"

    def test_missing_token_exits(self, config_file):
        result = CliRunner().invoke(cli_main.main, ["guilds"])
        assert result.exit_code == 1
        assert "No token" in result.output


class TestCommands:
    def test_guilds_json(self, config_file, monkeypatch):
        monkeypatch.setattr(cli_main, "_get_client", lambda: FakeCordlink())
        result = CliRunner().invoke(cli_main.main, ["guilds", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output)[0]["name"] == "Rustaceans"

    def test_guild_names_are_not_markup(self, config_file, monkeypatch):
        monkeypatch.setattr(cli_main, "_get_client", lambda: FakeCordlink())
        result = CliRunner().invoke(cli_main.main, ["guilds"])
        assert result.exit_code == 0
        assert "[/red] ops" in result.output

    def test_message_content_is_not_markup(self, config_file, monkeypatch):
        monkeypatch.setattr(cli_main, "_get_client", lambda: FakeCordlink())
        result = CliRunner().invoke(cli_main.main, ["messages", "10"])
        assert result.exit_code == 0
        assert "[ferris]: closing tag [/bold] here" in result.output

    def test_send(self, config_file, monkeypatch):
        monkeypatch.setattr(cli_main, "_get_client", lambda: FakeCordlink())
        result = CliRunner().invoke(cli_main.main, ["send", "10", "hi"])
        assert result.exit_code == 0
        assert "Sent message 77" in result.output

    def test_http_error_exit_code(self, config_file, monkeypatch):
        monkeypatch.setattr(cli_main, "_get_client", lambda: FakeCordlink())
        result = CliRunner().invoke(cli_main.main, ["channels", "1"])
        assert result.exit_code == 1
        assert "HTTP 403" in result.output

    def test_gateway_listen(self, config_file, monkeypatch):
        ready = dispatch("READY", 1, {"session_id": "s"})
        monkeypatch.setattr(cli_main, "_get_client", lambda: FakeCordlink(hello(), ready, None))
        result = CliRunner().invoke(cli_main.main, ["gateway", "listen"])
        assert result.exit_code == 0
        assert "READY" in result.output
        assert "Gateway closed: closed" in result.output

    def test_gateway_listen_json(self, config_file, monkeypatch):
        ready = dispatch("READY", 1, {"session_id": "s"})
        monkeypatch.setattr(cli_main, "_get_client", lambda: FakeCordlink(hello(), ready, None))
        result = CliRunner().invoke(cli_main.main, ["gateway", "listen", "--json"])
        assert result.exit_code == 0
        assert ready in result.output.splitlines()
