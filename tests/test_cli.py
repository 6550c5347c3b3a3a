"""Tests for the otpgen command line."""

import pytest

from otpgen import utils
from otpgen.cli import main


def test_hotp(capsys, secret_b32):
    assert main(["hotp", secret_b32, "--counter", "1"]) == 0
    assert capsys.readouterr().out.strip() == "287082"


def test_hotp_hex_key(capsys, key_hex):
    assert main(["hotp", key_hex, "--hex-key", "-c", "0"]) == 0
    assert capsys.readouterr().out.strip() == "755224"


def test_totp(capsys, secret_b32):
    assert main(["totp", secret_b32, "--time", "59", "--digits", "8"]) == 0
    assert capsys.readouterr().out.strip() == "94287082"


def test_secret(capsys):
    assert main(["secret"]) == 0
    assert len(utils.base32_to_bytes(capsys.readouterr().out.strip())) == 20
    assert main(["secret", "--hex", "--length", "4"]) == 0
    assert len(capsys.readouterr().out.strip()) == 8


def test_verify_totp(capsys, secret_b32):
    assert main(["verify", secret_b32, "94287082", "-d", "8", "-t", "59"]) == 0
    assert capsys.readouterr().out.strip() == "valid"
    assert main(["verify", secret_b32, "94287083", "-d", "8", "-t", "59"]) == 1
    assert capsys.readouterr().out.strip() == "mismatch"


def test_verify_hotp(capsys, secret_b32):
    assert main(["verify", secret_b32, "359152", "--counter", "0", "--window", "2"]) == 0
    assert main(["verify", secret_b32, "359152", "--counter", "0"]) == 1


@pytest.mark.parametrize(
    "argv",
    [
        ["hotp", "not base32!", "-c", "0"],
        ["hotp", "abc", "--hex-key", "-c", "0"],
        ["hotp", "", "-c", "0"],
        ["hotp", "GEZDGNBV", "-c", "0", "-d", "0"],
    ],
)
def test_errors_exit_with_status_2(capsys, argv):
    assert main(argv) == 2
    assert capsys.readouterr().err.startswith("error: ")


def test_missing_command():
    with pytest.raises(SystemExit):
        main([])
