from click.testing import CliRunner

from cli import cli


def test_directory_lists_configured_parties(monkeypatch):
    monkeypatch.setenv("DIRECTORY", '[{"id": 1, "name": "Emma"}, {"id": 2, "name": "Bruno"}]')

    result = CliRunner().invoke(cli, ["directory"])

    assert result.exit_code == 0
    assert result.output.splitlines() == ["1\tEmma", "2\tBruno"]


def test_run_passes_overrides_to_server(monkeypatch):
    calls = []
    monkeypatch.setattr("api.main.run", lambda host=None, port=None: calls.append((host, port)))

    result = CliRunner().invoke(cli, ["run", "--host", "127.0.0.1", "--port", "9001"])

    assert result.exit_code == 0
    assert calls == [("127.0.0.1", 9001)]
