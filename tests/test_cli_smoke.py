from __future__ import annotations

import json
from pathlib import Path

import pytest
from conftest import FakeTransport, feed_payload, json_response

from network_mashup import cli
from network_mashup.errors import TransportError
from network_mashup.router import ECHO_URL, TOP_FREE_URL, TOP_PAID_URL


@pytest.fixture
def cli_transport(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> FakeTransport:
    transport = FakeTransport()
    monkeypatch.chdir(tmp_path)
    for name in ("TOP_FREE_URL", "TOP_PAID_URL", "ECHO_URL"):
        monkeypatch.delenv(f"NETWORK_MASHUP_{name}", raising=False)
    monkeypatch.setattr(cli, "_build_transport", lambda: transport)
    return transport


def test_cli_no_command_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main([]) == 0
    assert "network-mashup" in capsys.readouterr().out


def test_cli_top_free(
    cli_transport: FakeTransport, capsys: pytest.CaptureFixture[str]
) -> None:
    cli_transport.on(TOP_FREE_URL, lambda request: json_response(feed_payload("A", "B")))

    code = cli.main(["top-free"])
    out = capsys.readouterr().out

    assert code == 0
    assert out.splitlines() == [
        "1\tA\thttps://img.example/A/53.png",
        "2\tB\thttps://img.example/B/53.png",
    ]


def test_cli_top_paid_json(
    cli_transport: FakeTransport, capsys: pytest.CaptureFixture[str]
) -> None:
    cli_transport.on(TOP_PAID_URL, lambda request: json_response(feed_payload("P")))

    code = cli.main(["top-paid", "--json"])
    lines = capsys.readouterr().out.splitlines()

    assert code == 0
    assert [json.loads(line) for line in lines] == [
        {"name": "P", "image_url": "https://img.example/P/53.png"}
    ]


def test_cli_fetch_failure(
    cli_transport: FakeTransport, capsys: pytest.CaptureFixture[str]
) -> None:
    def fail(request):
        raise TransportError("offline")

    cli_transport.on(TOP_FREE_URL, fail)

    assert cli.main(["top-free"]) == 1
    assert "failed to fetch top free" in capsys.readouterr().err


def test_cli_author(
    cli_transport: FakeTransport, capsys: pytest.CaptureFixture[str]
) -> None:
    cli_transport.on(TOP_FREE_URL, lambda request: json_response(feed_payload()))

    assert cli.main(["author", "free"]) == 0
    assert capsys.readouterr().out.strip() == "iTunes Store"


def test_cli_post(
    cli_transport: FakeTransport, capsys: pytest.CaptureFixture[str]
) -> None:
    cli_transport.on(ECHO_URL, lambda request: json_response({}))

    assert cli.main(["post", "--param", "title=hi", "--param", "body=a=b"]) == 0
    assert capsys.readouterr().out.strip() == "ok"
    body = cli_transport.sent[0].body
    assert body is not None
    assert json.loads(body) == {"title": "hi", "body": "a=b"}


def test_cli_post_rejects_bad_param(
    cli_transport: FakeTransport, capsys: pytest.CaptureFixture[str]
) -> None:
    assert cli.main(["post", "--param", "novalue"]) == 2
    assert "expected KEY=VALUE" in capsys.readouterr().err
    assert cli_transport.sent == []


def test_cli_upload(
    cli_transport: FakeTransport, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cli_transport.on(ECHO_URL, lambda request: json_response({}))
    image = tmp_path / "icon.png"
    image.write_bytes(b"\x89PNG")

    code = cli.main(["upload", str(image), "--param", "caption=x", "--boundary", "TOK"])

    assert code == 0
    sent = cli_transport.sent[0]
    assert sent.headers == {"Content-Type": "multipart/form-data; boundary=TOK"}
    assert sent.body is not None
    assert b'name="file"; filename="icon.png"' in sent.body
    assert b"Content-Type: image/png" in sent.body


def test_cli_upload_missing_file(
    cli_transport: FakeTransport, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    assert cli.main(["upload", str(tmp_path / "nope.png")]) == 2
    assert "file not found" in capsys.readouterr().err


def test_cli_missing_config(
    cli_transport: FakeTransport, capsys: pytest.CaptureFixture[str]
) -> None:
    assert cli.main(["--config", "/nonexistent/runtime.toml", "top-free"]) == 2
    assert "runtime config file not found" in capsys.readouterr().err
