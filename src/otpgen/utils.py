import base64
import binascii
import struct
import unicodedata
from hmac import compare_digest
from typing import Dict, Optional, Union
from urllib.parse import quote, urlencode, urlparse

from .exceptions import MalformedInputError

BASE32_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
HEX_ALPHABET = "0123456789abcdef"

# RFC 4226 feeds the HMAC an 8-byte counter
MOVING_FACTOR_BYTES = 8


def hex_to_bytes(value: str) -> bytes:
    """
    Decodes a hexadecimal string. Odd-length strings are rejected.

    :param value: hex string, upper or lower case
    :returns: the decoded bytes
    """
    if len(value) % 2:
        raise MalformedInputError("hex string has odd length: {}".format(len(value)))
    try:
        return binascii.unhexlify(value)
    except (binascii.Error, ValueError, TypeError) as exc:
        raise MalformedInputError("not a valid hex string") from exc


def bytes_to_hex(data: bytes) -> str:
    return binascii.hexlify(data).decode("ascii")


def base32_to_bytes(value: str) -> bytes:
    """
    Decodes a Base32 secret, case-insensitively.

    Authenticator apps and otpauth URIs drop the ``=`` padding, so missing
    padding is restored before decoding.

    :param value: Base32 string
    :returns: the decoded bytes
    """
    value = value.replace(" ", "")
    missing_padding = len(value) % 8
    if missing_padding:
        value += "=" * (8 - missing_padding)
    try:
        return base64.b32decode(value, casefold=True)
    except (binascii.Error, ValueError, TypeError) as exc:
        raise MalformedInputError("not a valid Base32 string") from exc


def bytes_to_base32(data: bytes) -> str:
    return base64.b32encode(data).decode("ascii")


def base32_to_hex(value: str) -> str:
    """Re-encodes a Base32 secret as hex."""
    return bytes_to_hex(base32_to_bytes(value))


def moving_factor_to_bytes(factor: Union[int, str]) -> bytes:
    """
    Turns a counter or time step into the 8-byte big-endian string fed to
    the HMAC.

    :param factor: a non-negative integer below 2**64, or a hex string
        encoding at most 8 bytes; shorter hex strings are left-padded with
        zero bytes
    :returns: exactly 8 bytes
    """
    if isinstance(factor, bool):
        raise TypeError("moving factor must be an int or a hex string")
    if isinstance(factor, int):
        if factor < 0:
            raise ValueError("moving factor must be a non-negative integer")
        try:
            return struct.pack(">Q", factor)
        except struct.error as exc:
            raise MalformedInputError("moving factor does not fit in 8 bytes") from exc
    if isinstance(factor, str):
        raw = hex_to_bytes(factor)
        if len(raw) > MOVING_FACTOR_BYTES:
            raise MalformedInputError("hex moving factor is longer than 8 bytes")
        return raw.rjust(MOVING_FACTOR_BYTES, b"\0")
    raise TypeError("moving factor must be an int or a hex string")


def int_to_hex(factor: int) -> str:
    """Serializes a moving factor as the 16-character hex string used at the string boundary."""
    return bytes_to_hex(moving_factor_to_bytes(factor))


def build_uri(
    secret: str,
    name: str,
    initial_count: Optional[int] = None,
    issuer: Optional[str] = None,
    algorithm: Optional[str] = None,
    digits: Optional[int] = None,
    period: Optional[int] = None,
    **kwargs,
) -> str:
    """
    Returns the otpauth:// provisioning URI for a secret. Rendered as a QR
    code it enrols the secret in an authenticator app.

    See also:
        https://github.com/google/google-authenticator/wiki/Key-Uri-Format

    :param secret: Base32 secret
    :param name: account name
    :param initial_count: starting counter; when given the URI is for HOTP,
        otherwise for TOTP
    :param issuer: organization shown by the authenticator app
    :param algorithm: HMAC digest name, omitted when it is sha1
    :param digits: code length, omitted when it is 6
    :param period: TOTP interval in seconds, omitted when it is 30
    :param kwargs: extra string query parameters (``image`` must be an https URL)
    :returns: provisioning URI
    """
    otp_type = "hotp" if initial_count is not None else "totp"
    params: Dict[str, Union[int, str]] = {"secret": secret.rstrip("=")}

    label = quote(name)
    if issuer is not None:
        label = quote(issuer) + ":" + label
        params["issuer"] = issuer

    if initial_count is not None:
        params["counter"] = initial_count
    if algorithm is not None and algorithm.lower() != "sha1":
        params["algorithm"] = algorithm.upper()
    if digits is not None and digits != 6:
        params["digits"] = digits
    if period is not None and period != 30:
        params["period"] = period

    for key, value in kwargs.items():
        if not isinstance(value, str):
            raise ValueError("otpauth uri parameters must be strings")
        if key == "image":
            image = urlparse(value)
            if image.scheme != "https" or not image.netloc or not image.path:
                raise ValueError("{} is not a valid url".format(value))
        params[key] = value

    return "otpauth://{0}/{1}?{2}".format(otp_type, label, urlencode(params).replace("+", "%20"))


def strings_equal(s1: str, s2: str) -> bool:
    """
    Timing-attack resistant string comparison.

    Both strings are NFKC-normalized first, so full-width digits typed on
    some keyboards compare equal to ASCII ones. The comparison still leaks
    whether the lengths differ.
    """
    s1 = unicodedata.normalize("NFKC", s1)
    s2 = unicodedata.normalize("NFKC", s2)
    return compare_digest(s1.encode("utf-8"), s2.encode("utf-8"))
