import enum
import secrets
from typing import Sequence, Union

from . import utils
from .exceptions import CryptoInitError as CryptoInitError
from .exceptions import MalformedInputError as MalformedInputError
from .exceptions import OTPError as OTPError
from .exceptions import UnsupportedTypeError as UnsupportedTypeError
from .hotp import HOTP as HOTP
from .hotp import create_hotp as create_hotp
from .otp import OTP as OTP
from .otp import truncated_code as truncated_code
from .totp import TOTP as TOTP
from .totp import create_totp as create_totp
from .totp import time_step as time_step
from .verify import Reason as Reason
from .verify import VerificationResult as VerificationResult
from .verify import check_hotp as check_hotp
from .verify import check_totp as check_totp
from .verify import verify_hotp as verify_hotp
from .verify import verify_totp as verify_totp

# 160 bits, the secret size RFC 4226 recommends
SECRET_BYTES = 20


class OTPType(enum.Enum):
    HOTP = "hotp"
    TOTP = "totp"


def _otp_type(type: Union[OTPType, str]) -> OTPType:
    if isinstance(type, OTPType):
        return type
    if isinstance(type, str):
        try:
            return OTPType(type.lower())
        except ValueError:
            pass
    raise UnsupportedTypeError("OTP type not recognized: {!r}".format(type))


def create(key: str, base: Union[int, str], digits: int, type: Union[OTPType, str]) -> str:
    """
    Creates a one-time password with the given key, base, digits and type.

    See also:
        https://tools.ietf.org/html/rfc4226
        https://tools.ietf.org/html/rfc6238

    :param key: the secret, hex encoded
    :param base: the moving factor: a counter for HOTP, a time step for TOTP
    :param digits: the length of the code (e.g. 6 for 123006)
    :param type: OTPType.HOTP or OTPType.TOTP, or their names
    :returns: code
    """
    otp_type = _otp_type(type)
    if otp_type is OTPType.HOTP:
        return create_hotp(key, base, digits)
    return create_totp(key, base, digits)


def random(characters: Sequence[str], length: int = SECRET_BYTES) -> str:
    """
    Picks ``length`` characters uniformly, with replacement, from ``characters``.

    :param characters: the alphabet to draw from
    :param length: number of characters; values below 1 mean 20
    """
    if not characters:
        raise ValueError("characters must not be empty")
    if length < 1:
        length = SECRET_BYTES
    return "".join(secrets.choice(characters) for _ in range(length))


def random_base32(length: int = SECRET_BYTES) -> str:
    """
    Returns ``length`` random bytes, Base32 encoded (with ``=`` padding).

    :param length: number of random bytes; values below 1 mean 20
    """
    if length < 1:
        length = SECRET_BYTES
    return utils.bytes_to_base32(secrets.token_bytes(length))


def random_hex(length: int = SECRET_BYTES) -> str:
    """
    Returns ``length`` random bytes, hex encoded.

    :param length: number of random bytes; values below 1 mean 20
    """
    if length < 1:
        length = SECRET_BYTES
    return utils.bytes_to_hex(secrets.token_bytes(length))
