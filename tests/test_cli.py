from __future__ import annotations

from pathlib import Path

import pytest

from agitlink import cli
from agitlink.acme import WindowSnapshot
from agitlink.config import AppConfig
from agitlink.errors import ExternalToolError
from agitlink.repo import RepoContext

COMMIT = "fedcba9876543210fedcba9876543210fedcba98"
BODY = b"one\ntwo\nthree\n"


def make_env(monkeypatch: pytest.MonkeyPatch, root: Path, window_id: int = 5) -> None:
    monkeypatch.setenv("winid", str(window_id))
    monkeypatch.setenv("AGITLINK_ACME_ROOT", str(root))
    monkeypatch.delenv("AGITLINK_CHUNK_SIZE", raising=False)


def make_acme(root: Path, file_path: str, *, addr: str, window_id: int = 5) -> Path:
    directory = root / str(window_id)
    directory.mkdir(parents=True)
    (directory / "addr").write_text(addr)
    (directory / "ctl").write_bytes(b"")
    (directory / "body").write_bytes(BODY)
    (directory / "tag").write_text(f"{file_path} Del Snarf | Look ")
    return directory


def stub_repo(monkeypatch: pytest.MonkeyPatch) -> None:
    def resolve(file_path: str, *, prefix: str) -> RepoContext:
        assert file_path == "/src/repo/notes.txt"
        assert prefix == "git@github.com:"
        return RepoContext(remote="owner/repo", relative_path="notes.txt", commit=COMMIT)

    monkeypatch.setattr(cli, "resolve_repo_context", resolve)


def test_prints_single_line_permalink(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    make_acme(tmp_path, "/src/repo/notes.txt", addr="4 13 ")
    make_env(monkeypatch, tmp_path)
    stub_repo(monkeypatch)

    assert cli.main([]) == 0

    out, err = capsys.readouterr()
    assert out == f"https://github.com/owner/repo/blob/{COMMIT}/notes.txt#L2-L3\n"
    assert err == ""


def test_single_line_selection(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    make_acme(tmp_path, "/src/repo/notes.txt", addr="4 7 ")
    make_env(monkeypatch, tmp_path)
    stub_repo(monkeypatch)

    assert cli.main([]) == 0
    assert capsys.readouterr().out.endswith("/notes.txt#L2\n")


def test_missing_winid_reports_error(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.delenv("winid", raising=False)

    assert cli.main([]) == 1

    out, err = capsys.readouterr()
    assert out == ""
    assert err == "agitlink: $winid not set - not running inside acme?\n"


def test_malformed_tag_prints_no_url(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    directory = make_acme(tmp_path, "/src/repo/notes.txt", addr="4 7 ")
    (directory / "tag").write_text("/src/repo/notes.txt")
    make_env(monkeypatch, tmp_path)
    stub_repo(monkeypatch)

    assert cli.main([]) == 1

    out, err = capsys.readouterr()
    assert out == ""
    assert err == "agitlink: strange tag with no spaces\n"


def test_missing_window_reports_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    make_env(monkeypatch, tmp_path, window_id=99)

    assert cli.main([]) == 1
    assert "no such window" in capsys.readouterr().err


def test_repo_errors_carry_context(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    snapshot = WindowSnapshot(file_path="/src/repo/notes.txt", body=BODY, q0=0, q1=3)
    monkeypatch.setattr(cli, "read_current_window", lambda config: snapshot)

    def fail(file_path: str, *, prefix: str) -> RepoContext:
        raise ExternalToolError("fatal: bad").wrap("cannot get commit")

    monkeypatch.setattr(cli, "resolve_repo_context", fail)
    monkeypatch.setenv("winid", "1")

    assert cli.main([]) == 1
    assert capsys.readouterr().err == "agitlink: cannot get commit: fatal: bad\n"


def test_build_permalink_uses_configured_host(monkeypatch: pytest.MonkeyPatch) -> None:
    snapshot = WindowSnapshot(file_path="/src/repo/notes.txt", body=BODY, q0=0, q1=0)
    monkeypatch.setattr(cli, "read_current_window", lambda config: snapshot)
    stub_repo(monkeypatch)

    url = cli.build_permalink(AppConfig(window_id=1, host="github.example.org"))

    assert url == f"https://github.example.org/owner/repo/blob/{COMMIT}/notes.txt#L1"


def test_version_flag(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--version"])

    assert excinfo.value.code == 0
    assert capsys.readouterr().out.startswith("agitlink ")
