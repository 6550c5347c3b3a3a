"""Tests for TOTP generation against the RFC 6238 vectors."""

import base64
import datetime
import hashlib
import time

import pytest

import otpgen
from otpgen import TOTP, time_step

SHA256_SECRET = base64.b32encode(b"12345678901234567890123456789012").decode()
SHA512_SECRET = base64.b32encode(b"1234567890" * 6 + b"1234").decode()


@pytest.mark.parametrize(
    "for_time,expected",
    [
        (59, "94287082"),
        (1111111109, "07081804"),
        (1111111111, "14050471"),
        (1234567890, "89005924"),
        (2000000000, "69279037"),
        (20000000000, "65353130"),
    ],
)
def test_create_totp_rfc6238_sha1(key_hex, for_time, expected):
    assert otpgen.create_totp(key_hex, time_step(for_time), 8) == expected


def test_time_step_one_is_59_seconds(key_hex):
    assert time_step(59) == 1
    assert otpgen.create_totp(key_hex, "0000000000000001", 8) == "94287082"


@pytest.mark.parametrize(
    "digest,secret,for_time,expected",
    [
        (hashlib.sha256, SHA256_SECRET, 59, "46119246"),
        (hashlib.sha256, SHA256_SECRET, 1111111109, "68084774"),
        (hashlib.sha256, SHA256_SECRET, 20000000000, "77737706"),
        (hashlib.sha512, SHA512_SECRET, 59, "90693936"),
        (hashlib.sha512, SHA512_SECRET, 1111111109, "25091201"),
        (hashlib.sha512, SHA512_SECRET, 20000000000, "47863826"),
    ],
)
def test_rfc6238_other_digests(digest, secret, for_time, expected):
    assert TOTP(secret, digits=8, digest=digest).at(for_time) == expected


def test_time_step_rounds_to_nearest_second():
    assert time_step(29.4) == 0
    assert time_step(29.5) == 1
    assert time_step(89, interval=60) == 1


def test_time_step_accepts_datetimes():
    moment = datetime.datetime(2009, 2, 13, 23, 31, 30, tzinfo=datetime.timezone.utc)
    assert time_step(moment) == 1234567890 // 30


def test_time_step_defaults_to_now(monkeypatch):
    monkeypatch.setattr(time, "time", lambda: 1111111109.2)
    assert time_step() == 37037036


def test_time_step_rejects_bad_interval():
    with pytest.raises(ValueError):
        time_step(59, interval=0)


def test_totp_class(secret_b32):
    totp = TOTP(secret_b32, digits=8)
    moment = datetime.datetime(2009, 2, 13, 23, 31, 30, tzinfo=datetime.timezone.utc)
    assert totp.at(moment) == "89005924"
    assert totp.at(29, counter_offset=1) == "94287082"


def test_now(monkeypatch, secret_b32):
    monkeypatch.setattr(time, "time", lambda: 59.0)
    assert TOTP(secret_b32, digits=8).now() == "94287082"


def test_verify_window(secret_b32):
    totp = TOTP(secret_b32, digits=8)
    assert totp.verify("94287082", for_time=59)
    assert not totp.verify("94287082", for_time=89)
    assert totp.verify("94287082", for_time=89, valid_window=1)
    assert totp.match("94287082", for_time=89, valid_window=1) == 1


def test_provisioning_uri(secret_b32):
    totp = TOTP(secret_b32, name="alice@example.com", issuer="Example")
    assert totp.provisioning_uri() == (
        "otpauth://totp/Example:alice%40example.com?secret=" + secret_b32 + "&issuer=Example"
    )


def test_provisioning_uri_non_default_parameters(secret_b32):
    totp = TOTP(secret_b32, digits=8, digest=hashlib.sha256, interval=60)
    assert totp.provisioning_uri("alice") == (
        "otpauth://totp/alice?secret=" + secret_b32 + "&algorithm=SHA256&digits=8&period=60"
    )
