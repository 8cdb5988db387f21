"""Tests for the environment drift detection script."""

from __future__ import annotations

from pathlib import Path

import pytest

from scripts import check_env

ENV_KEYS = [
    "GOOGLE_CLIENT_ID",
    "GOOGLE_CLIENT_SECRET",
    "OAUTH_REDIRECT_HOST",
    "OAUTH_REDIRECT_PORT",
    "OAUTH_DATA_DIR",
]


def _write_env(env_path: Path, **values: str) -> None:
    contents = "\n".join(f"{key}={value}" for key, value in values.items())
    env_path.write_text(contents + "\n", encoding="utf-8")


def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Unset the keys the script loads, restoring the originals after the test."""
    for key in ENV_KEYS:
        monkeypatch.setenv(key, "placeholder")
        monkeypatch.delenv(key)


@pytest.mark.parametrize("command", ["record", "verify", "check"])
def test_main_requires_existing_env_file(tmp_path: Path, command: str) -> None:
    env_file = tmp_path / ".missing-env"
    hash_file = tmp_path / ".env.sha256"

    argv = [command, "--env-file", str(env_file)]
    if command != "check":
        argv.extend(["--hash-file", str(hash_file)])

    exit_code = check_env.main(argv)
    assert exit_code == check_env.EXIT_RUNTIME_ERROR


def test_check_prints_redirect_uri_and_creates_data_dir(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    env_file = tmp_path / ".env"
    data_dir = tmp_path / "data"

    _isolate_env(monkeypatch)
    _write_env(
        env_file,
        GOOGLE_CLIENT_SECRET="secret",
        OAUTH_REDIRECT_HOST="10.0.0.5",
        OAUTH_REDIRECT_PORT="9000",
        OAUTH_DATA_DIR=str(data_dir),
    )

    exit_code = check_env.main(["check", "--env-file", str(env_file)])

    assert exit_code == check_env.EXIT_OK
    assert data_dir.is_dir()
    assert "http://10.0.0.5:9000/oauth-callback" in capsys.readouterr().out


def test_record_and_verify_detects_mismatched_checksum(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    env_file = tmp_path / ".env"
    hash_file = tmp_path / ".env.sha256"
    data_dir = tmp_path / "data"

    _isolate_env(monkeypatch)
    _write_env(env_file, GOOGLE_CLIENT_SECRET="secret", OAUTH_DATA_DIR=str(data_dir))

    exit_code = check_env.main(
        ["record", "--env-file", str(env_file), "--hash-file", str(hash_file)]
    )
    assert exit_code == check_env.EXIT_OK
    assert hash_file.read_text(encoding="utf-8").strip()

    _isolate_env(monkeypatch)
    exit_code = check_env.main(
        ["verify", "--env-file", str(env_file), "--hash-file", str(hash_file)]
    )
    assert exit_code == check_env.EXIT_OK

    _write_env(env_file, GOOGLE_CLIENT_SECRET="rotated", OAUTH_DATA_DIR=str(data_dir))

    _isolate_env(monkeypatch)
    exit_code = check_env.main(
        ["verify", "--env-file", str(env_file), "--hash-file", str(hash_file)]
    )
    assert exit_code == check_env.EXIT_CHECKSUM_ERROR


def test_validation_failure_for_missing_client_secret(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    env_file = tmp_path / ".env"
    hash_file = tmp_path / ".env.sha256"

    _isolate_env(monkeypatch)
    _write_env(env_file, OAUTH_REDIRECT_PORT="8888", OAUTH_DATA_DIR=str(tmp_path))

    exit_code = check_env.main(
        ["record", "--env-file", str(env_file), "--hash-file", str(hash_file)]
    )
    assert exit_code == check_env.EXIT_VALIDATION_ERROR
    assert not hash_file.exists()


def test_invalid_port_is_a_validation_failure(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    env_file = tmp_path / ".env"

    _isolate_env(monkeypatch)
    _write_env(
        env_file,
        GOOGLE_CLIENT_SECRET="secret",
        OAUTH_REDIRECT_PORT="not-a-port",
        OAUTH_DATA_DIR=str(tmp_path),
    )

    assert check_env.main(["check", "--env-file", str(env_file)]) == check_env.EXIT_VALIDATION_ERROR


def test_unusable_data_dir_is_reported(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_file = tmp_path / ".env"
    blocking_file = tmp_path / "occupied"
    blocking_file.write_text("", encoding="utf-8")

    _isolate_env(monkeypatch)
    _write_env(
        env_file,
        GOOGLE_CLIENT_SECRET="secret",
        OAUTH_DATA_DIR=str(blocking_file / "data"),
    )

    assert check_env.main(["check", "--env-file", str(env_file)]) == check_env.EXIT_STORAGE_ERROR
