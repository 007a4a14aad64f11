"""Unit tests for the SealBox command line app."""

from pathlib import Path
from unittest.mock import patch

import pytest

from sealbox.core.exceptions import (
    AuthenticationFailedError,
    InvalidContainerError,
    IOFailureError,
    RandomnessUnavailableError,
    UsageError,
)
from sealbox.frontend.cli import app


# --- Fixtures ---

@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("SEALBOX_PASSWORD", "SEALBOX_WORKERS", "SEALBOX_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sample(tmp_path: Path) -> Path:
    path = tmp_path / "doc.txt"
    path.write_bytes(b"hello world")
    return path


# --- Exit codes ---

@pytest.mark.parametrize(
    "error, code",
    [
        (AuthenticationFailedError(), app.EXIT_CRYPTO),
        (InvalidContainerError("short"), app.EXIT_CRYPTO),
        (UsageError("x"), app.EXIT_USAGE),
        (IOFailureError("f", "denied"), app.EXIT_IO),
        (RandomnessUnavailableError("x"), app.EXIT_RANDOMNESS),
    ],
)
def test_exit_code_for(error, code):
    assert app.exit_code_for(error) == code


# --- Argument parsing ---

def test_parser_requires_command():
    with pytest.raises(SystemExit):
        app.build_arg_parser().parse_args([])


def test_parser_encrypt_args():
    args = app.build_arg_parser().parse_args(
        ["-v", "encrypt", "--password", "pw", "-j", "2", "-f", "a", "b"]
    )
    assert args.command == "encrypt"
    assert args.password == "pw"
    assert args.jobs == 2
    assert args.force is True
    assert args.files == ["a", "b"]
    assert args.verbose == 1


# --- Commands ---

def test_encrypt_then_decrypt(sample: Path, capsys):
    assert app.main(["encrypt", "--password", "correct horse", str(sample)]) == 0
    enc = sample.with_name("doc.txt.enc")
    assert enc.exists()
    assert f"File encrypted successfully: {enc}" in capsys.readouterr().out

    sample.unlink()
    assert app.main(["decrypt", "--password", "correct horse", str(enc)]) == 0
    assert sample.read_bytes() == b"hello world"
    assert f"File decrypted successfully: {sample}" in capsys.readouterr().out


def test_decrypt_wrong_password(sample: Path, capsys):
    app.main(["encrypt", "-p", "correct horse", str(sample)])
    out = sample.with_name("restored.txt")
    code = app.main(["decrypt", "-p", "wrong horse", "-o", str(out), str(sample) + ".enc"])
    assert code == app.EXIT_CRYPTO
    assert not out.exists()
    err = capsys.readouterr().err
    assert "Decrypt failed" in err
    assert "wrong horse" not in err


def test_password_from_env(sample: Path, monkeypatch):
    monkeypatch.setenv("SEALBOX_PASSWORD", "from-env")
    assert app.main(["encrypt", str(sample)]) == 0
    out = sample.with_name("out.txt")
    assert app.main(["decrypt", "-o", str(out), str(sample) + ".enc"]) == 0
    assert out.read_bytes() == b"hello world"


def test_missing_password_is_usage_error(sample: Path, capsys):
    with patch("sealbox.frontend.cli.context.sys.stdin") as stdin:
        stdin.isatty.return_value = False
        code = app.main(["encrypt", str(sample)])
    assert code == app.EXIT_USAGE
    assert "password is required" in capsys.readouterr().err


def test_output_with_many_files_is_usage_error(sample: Path):
    code = app.main(["encrypt", "-p", "pw", "-o", "x.enc", str(sample), str(sample)])
    assert code == app.EXIT_USAGE


def test_missing_file_is_io_error(tmp_path: Path):
    code = app.main(["encrypt", "-p", "pw", str(tmp_path / "absent.txt")])
    assert code == app.EXIT_IO


def test_batch_reports_worst_code(sample: Path, tmp_path: Path, capsys):
    short = tmp_path / "short.enc"
    short.write_bytes(b"tiny")
    app.main(["encrypt", "-p", "pw", str(sample)])
    code = app.main(
        ["decrypt", "-p", "pw", "-j", "2", "-f", str(sample) + ".enc", str(short),
         str(tmp_path / "gone.enc")]
    )
    assert code == app.EXIT_IO
    captured = capsys.readouterr()
    assert "File decrypted successfully" in captured.out
    assert "invalid encrypted data" in captured.err


def test_info(capsys):
    assert app.main(["info"]) == 0
    out = capsys.readouterr().out
    assert "100000 iterations" in out
    assert "header: 28 bytes" in out


def test_non_utf8_password_roundtrip(sample: Path):
    """A password holding undecodable bytes (surrogates in argv) still works."""
    password = "\udcff"
    assert app.main(["encrypt", "-p", password, str(sample)]) == 0
    out = sample.with_name("back.txt")
    assert app.main(["decrypt", "-p", password, "-o", str(out), str(sample) + ".enc"]) == 0
    assert out.read_bytes() == b"hello world"


def test_too_long_file_name_exits_with_io_error(tmp_path: Path, capsys):
    code = app.main(["encrypt", "-p", "pw", str(tmp_path / ("a" * 252))])
    assert code == app.EXIT_IO
    assert "Encrypt failed" in capsys.readouterr().err
