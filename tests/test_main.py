import json

import pytest

from passfield_guard import main as cli


@pytest.fixture
def extension_dir(tmp_path):
    (tmp_path / "config.json").write_text(json.dumps({"whitelistUrl": "whitelist.txt"}))
    (tmp_path / "whitelist.txt").write_text("example.com\n*.corp.example.org\n")
    return tmp_path


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda level: None)


def _verdicts(stdout: str) -> dict[str, bool]:
    lines = [line for line in stdout.splitlines() if line.startswith('{"domain"')]
    return {d["domain"]: d["isWhitelisted"] for d in map(json.loads, lines)}


@pytest.mark.asyncio
async def test_run_prints_verdicts(extension_dir, capsys):
    args = cli._parse_args(
        ["--base-url", str(extension_dir), "www.example.com", "corp.example.org", "A.Corp.Example.org"]
    )
    status = await cli.run(args)

    assert status == 0
    assert _verdicts(capsys.readouterr().out) == {
        "www.example.com": True,
        "corp.example.org": False,
        "A.Corp.Example.org": True,
    }


@pytest.mark.asyncio
async def test_strict_mode_fails_on_untrusted(extension_dir, capsys):
    args = cli._parse_args(["--strict", "--base-url", str(extension_dir), "evil.com"])
    assert await cli.run(args) == 1
    assert _verdicts(capsys.readouterr().out) == {"evil.com": False}


@pytest.mark.asyncio
async def test_missing_config_fails_closed(tmp_path, capsys):
    args = cli._parse_args(["--base-url", str(tmp_path), "example.com"])
    assert await cli.run(args) == 0
    assert _verdicts(capsys.readouterr().out) == {"example.com": False}
