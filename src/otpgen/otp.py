import hashlib
import hmac
from typing import Any, Optional, Union

from . import utils
from .exceptions import CryptoInitError

DEFAULT_DIGITS = 6

# dynamic truncation reads 4 bytes at an offset of up to 15
MIN_DIGEST_SIZE = 18


def _check_digest(digest: Any) -> None:
    if digest in [hashlib.md5, hashlib.shake_128]:
        raise ValueError("selected digest function must generate digest size greater than or equals to 18 bytes")


def _check_digits(digits: int) -> None:
    if digits < 1:
        raise ValueError("digits must be a positive integer")


def truncated_code(
    secret: bytes,
    moving_factor: Union[int, str],
    digits: int = DEFAULT_DIGITS,
    digest: Any = hashlib.sha1,
) -> str:
    """
    Computes an RFC 4226 one-time password.

    HMAC the 8-byte big-endian moving factor with the secret, pick 4 bytes
    of the digest at the offset given by the low nibble of its last byte,
    drop the sign bit and reduce modulo 10**digits.

    :param secret: raw key bytes
    :param moving_factor: counter or time step, as an int or a hex string
    :param digits: length of the code
    :param digest: hashlib constructor used by the HMAC
    :returns: the code, left-padded with zeros to exactly ``digits`` characters
    """
    _check_digits(digits)
    _check_digest(digest)
    message = utils.moving_factor_to_bytes(moving_factor)
    if not secret:
        raise CryptoInitError("secret must not be empty")
    try:
        hasher = hmac.new(bytes(secret), message, digest)
    except (TypeError, ValueError) as exc:
        raise CryptoInitError("could not initialize HMAC: {}".format(exc)) from exc
    if hasher.digest_size < MIN_DIGEST_SIZE:
        raise ValueError("digest size is lower than 18 bytes, which will trigger error on otp generation")

    hmac_hash = hasher.digest()
    offset = hmac_hash[-1] & 0xF
    code = int.from_bytes(hmac_hash[offset : offset + 4], "big") & 0x7FFFFFFF
    return str(code % 10**digits).zfill(digits)


class OTP(object):
    """
    Base class for OTP handlers.
    """

    def __init__(
        self,
        s: str,
        digits: int = DEFAULT_DIGITS,
        digest: Any = hashlib.sha1,
        name: Optional[str] = None,
        issuer: Optional[str] = None,
    ) -> None:
        """
        :param s: secret in base32 format
        :param digits: number of integers in the OTP
        :param digest: digest function to use in the HMAC (expected to be SHA1)
        :param name: account name
        :param issuer: issuer
        """
        _check_digits(digits)
        _check_digest(digest)
        self.digits = digits
        self.digest = digest
        self.secret = s
        self.name = name or "Secret"
        self.issuer = issuer

    def generate_otp(self, input: int) -> str:
        """
        :param input: the HMAC counter value to use as the OTP input.
            Usually either the counter, or the computed integer based on the Unix timestamp
        """
        return truncated_code(self.byte_secret(), input, self.digits, self.digest)

    def byte_secret(self) -> bytes:
        return utils.base32_to_bytes(self.secret)
