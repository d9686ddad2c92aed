import io
import json
import os
import sys
from datetime import timedelta

import httpx
import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import trident.cli as cli_module
from trident.clients.orchestrator import OrchestratorClient
from trident.config import get_settings
from trident.timeutil import parse_rfc3339


class RecordingTransport(httpx.MockTransport):
    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(201, json={"id": 7})


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    for name in list(os.environ):
        if name.startswith("TRIDENT_"):
            monkeypatch.delenv(name)
    monkeypatch.setenv("TRIDENT_ORCHESTRATOR_URL", "https://orchestrator.example")
    monkeypatch.setenv("TRIDENT_PROVIDERS", '{"okta": {"subdomain": "example"}}')
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def transport(monkeypatch) -> RecordingTransport:
    transport = RecordingTransport()

    def factory(*args, **kwargs) -> OrchestratorClient:
        return OrchestratorClient(*args, transport=transport, **kwargs)

    monkeypatch.setattr(cli_module, "OrchestratorClient", factory)
    return transport


@pytest.fixture
def wordlists(tmp_path):
    users = tmp_path / "users.txt"
    users.write_text("alice\nbob\n", encoding="utf-8")
    passwords = tmp_path / "passwords.txt"
    passwords.write_text("Winter2024\n", encoding="utf-8")
    return str(users), str(passwords)


def _answer(monkeypatch, text: str) -> None:
    monkeypatch.setattr(sys, "stdin", io.StringIO(text))


def test_create_end_to_end_with_defaults(monkeypatch, capsys, transport, wordlists) -> None:
    user_file, password_file = wordlists
    _answer(monkeypatch, "y\n")

    exit_code = cli_module.main(["campaign", "create", "-u", user_file, "-p", password_file])

    assert exit_code == 0
    (request,) = transport.requests
    assert str(request.url) == "https://orchestrator.example/campaign"
    payload = json.loads(request.content)
    assert payload["users"] == ["alice", "bob"]
    assert payload["passwords"] == ["Winter2024"]
    assert payload["status"] == "active"
    assert payload["provider"] == "okta"
    assert payload["provider_metadata"] == {"subdomain": "example"}
    not_before = parse_rfc3339(payload["not_before"])
    not_after = parse_rfc3339(payload["not_after"])
    assert not_after - not_before == timedelta(hours=672)

    out = capsys.readouterr().out
    assert "[Campaign Summary]" in out
    assert "Send campaign? [y/N]: " in out


def test_declining_exits_successfully_without_request(monkeypatch, transport, wordlists) -> None:
    user_file, password_file = wordlists
    _answer(monkeypatch, "no\n")

    exit_code = cli_module.main(["campaign", "create", "-u", user_file, "-p", password_file])

    assert exit_code == 0
    assert transport.requests == []


def test_missing_wordlist_exits_nonzero_before_network(monkeypatch, tmp_path, transport, wordlists) -> None:
    user_file, _ = wordlists
    _answer(monkeypatch, "y\n")

    exit_code = cli_module.main(
        ["campaign", "create", "-u", user_file, "-p", str(tmp_path / "missing.txt")]
    )

    assert exit_code == 1
    assert transport.requests == []


def test_closed_stdin_is_fatal(monkeypatch, transport, wordlists) -> None:
    user_file, password_file = wordlists
    _answer(monkeypatch, "")

    exit_code = cli_module.main(["campaign", "create", "-u", user_file, "-p", password_file])

    assert exit_code == 1
    assert transport.requests == []


def test_bad_not_before_is_fatal(monkeypatch, transport, wordlists) -> None:
    user_file, password_file = wordlists
    _answer(monkeypatch, "y\n")

    exit_code = cli_module.main(
        ["campaign", "create", "-u", user_file, "-p", password_file, "-b", "2024-13-45"]
    )

    assert exit_code == 1
    assert transport.requests == []


def test_flags_are_forwarded(monkeypatch, transport, wordlists) -> None:
    user_file, password_file = wordlists
    monkeypatch.setenv("TRIDENT_AUTH_TOKEN", "s3cret")

    exit_code = cli_module.main(
        [
            "campaign", "create",
            "-u", user_file,
            "-p", password_file,
            "-b", "2024-06-01T08:00:00+02:00",
            "-w", "2h",
            "-i", "30s",
            "-a", "azure",
            "--yes",
        ]
    )

    assert exit_code == 0
    (request,) = transport.requests
    assert request.headers["Authorization"] == "Bearer s3cret"
    payload = json.loads(request.content)
    assert payload["not_before"] == "2024-06-01T08:00:00+02:00"
    assert payload["not_after"] == "2024-06-01T10:00:00+02:00"
    assert payload["schedule_interval"] == 30_000_000_000
    assert payload["provider"] == "azure"
    assert payload["provider_metadata"] is None


def test_transport_failure_exits_nonzero(monkeypatch, wordlists) -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    def factory(*args, **kwargs) -> OrchestratorClient:
        return OrchestratorClient(*args, transport=httpx.MockTransport(refuse), **kwargs)

    monkeypatch.setattr(cli_module, "OrchestratorClient", factory)
    user_file, password_file = wordlists

    exit_code = cli_module.main(["campaign", "create", "-u", user_file, "-p", password_file, "-y"])

    assert exit_code == 1


def test_missing_required_flag_is_a_usage_error(wordlists) -> None:
    user_file, _ = wordlists

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["campaign", "create", "-u", user_file])

    assert excinfo.value.code == 2


@pytest.mark.parametrize("window", ["-1h", "soon", "100000000000h"])
def test_invalid_window_is_a_usage_error(wordlists, window: str) -> None:
    user_file, password_file = wordlists

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["campaign", "create", "-u", user_file, "-p", password_file, "-w", window])

    assert excinfo.value.code == 2


def test_config_file_supplies_orchestrator_and_providers(monkeypatch, tmp_path, transport, wordlists) -> None:
    monkeypatch.delenv("TRIDENT_ORCHESTRATOR_URL")
    monkeypatch.delenv("TRIDENT_PROVIDERS")
    config = tmp_path / "trident.json"
    config.write_text(
        json.dumps(
            {
                "orchestrator-url": "http://10.0.0.5:9999/",
                "providers": {"okta": {"subdomain": "corp"}},
            }
        ),
        encoding="utf-8",
    )
    user_file, password_file = wordlists

    exit_code = cli_module.main(
        ["--config", str(config), "campaign", "create", "-u", user_file, "-p", password_file, "-y"]
    )

    assert exit_code == 0
    (request,) = transport.requests
    assert str(request.url) == "http://10.0.0.5:9999/campaign"
    assert json.loads(request.content)["provider_metadata"] == {"subdomain": "corp"}


def test_unreadable_config_file_exits_nonzero(tmp_path, transport, wordlists) -> None:
    user_file, password_file = wordlists

    exit_code = cli_module.main(
        ["--config", str(tmp_path / "absent.json"), "campaign", "create", "-u", user_file, "-p", password_file]
    )

    assert exit_code == 1
    assert transport.requests == []


def test_dry_run_prints_payload(capsys, transport, wordlists) -> None:
    user_file, password_file = wordlists

    exit_code = cli_module.main(
        ["campaign", "create", "-u", user_file, "-p", password_file, "--dry-run"]
    )

    assert exit_code == 0
    assert transport.requests == []
    assert '"passwords":["Winter2024"]' in capsys.readouterr().out
