"""
Checks candidate codes against Base32 secrets.

The ``verify_*`` functions answer with a plain bool and never raise on bad
input. The ``check_*`` functions do the same work but say why a code was
rejected.
"""

import enum
import logging
import unicodedata
from dataclasses import dataclass
from typing import Iterable, Optional

from . import utils
from .exceptions import MalformedInputError
from .hotp import create_hotp
from .totp import DEFAULT_INTERVAL, Timestamp, create_totp, time_step

logger = logging.getLogger(__name__)


class Reason(enum.Enum):
    VALID = "valid"
    MISMATCH = "mismatch"
    MALFORMED_SECRET = "malformed_secret"
    MALFORMED_CODE = "malformed_code"
    ERROR = "error"


@dataclass(frozen=True)
class VerificationResult:
    valid: bool
    reason: Reason
    # counter or time step the code matched
    moving_factor: Optional[int] = None

    def __bool__(self) -> bool:
        return self.valid


def _rejected(reason: Reason) -> VerificationResult:
    logger.debug("OTP verification failed: %s", reason.value)
    return VerificationResult(valid=False, reason=reason)


def _is_well_formed(code: str, digits: int) -> bool:
    if not isinstance(code, str):
        return False
    code = unicodedata.normalize("NFKC", code)
    return len(code) == digits and all(c in "0123456789" for c in code)


def _decode_secret(secret: str) -> Optional[str]:
    try:
        key = utils.base32_to_hex(secret)
    except (MalformedInputError, AttributeError, TypeError):
        return None
    return key or None


def _check(secret: str, code: str, digits: int, create, factors: Iterable[int]) -> VerificationResult:
    key = _decode_secret(secret)
    if key is None:
        return _rejected(Reason.MALFORMED_SECRET)
    if not _is_well_formed(code, digits):
        return _rejected(Reason.MALFORMED_CODE)
    try:
        for factor in factors:
            if utils.strings_equal(code, create(key, factor, digits)):
                return VerificationResult(valid=True, reason=Reason.VALID, moving_factor=factor)
    except Exception:
        logger.debug("OTP verification raised", exc_info=True)
        return _rejected(Reason.ERROR)
    return _rejected(Reason.MISMATCH)


def check_totp(
    secret: str,
    code: str,
    digits: int,
    for_time: Optional[Timestamp] = None,
    valid_window: int = 0,
    interval: int = DEFAULT_INTERVAL,
) -> VerificationResult:
    """
    Checks a time-based code.

    :param secret: the shared secret, Base32 encoded
    :param code: the code to check
    :param digits: length of the code (e.g. 6 for 123006)
    :param for_time: time to check the code at, defaults to now
    :param valid_window: number of steps before and after the current one
        also accepted
    :param interval: step length in seconds
    """
    try:
        current = time_step(for_time, interval)
        if valid_window < 0:
            raise ValueError("valid_window must not be negative")
        steps = range(max(current - valid_window, 0), current + valid_window + 1)
    except (TypeError, ValueError, OverflowError):
        logger.debug("OTP verification raised", exc_info=True)
        return _rejected(Reason.ERROR)
    return _check(secret, code, digits, create_totp, steps)


def check_hotp(secret: str, code: str, digits: int, counter: int, window: int = 0) -> VerificationResult:
    """
    Checks a counter-based code.

    The caller tracks the counter and, after a successful check, should move
    it past ``result.moving_factor``.

    :param secret: the shared secret, Base32 encoded
    :param code: the code to check
    :param digits: length of the code (e.g. 6 for 123006)
    :param counter: the next counter the caller expects
    :param window: number of counters after ``counter`` also accepted
    """
    try:
        if window < 0:
            raise ValueError("window must not be negative")
        counters = range(counter, counter + window + 1)
    except (TypeError, ValueError):
        logger.debug("OTP verification raised", exc_info=True)
        return _rejected(Reason.ERROR)
    return _check(secret, code, digits, create_hotp, counters)


def verify_totp(
    secret: str,
    code: str,
    digits: int,
    for_time: Optional[Timestamp] = None,
    valid_window: int = 0,
    interval: int = DEFAULT_INTERVAL,
) -> bool:
    """
    Returns true if the code is valid for the time-based OTP of the secret.
    """
    return check_totp(secret, code, digits, for_time, valid_window, interval).valid


def verify_hotp(secret: str, code: str, digits: int, counter: int, window: int = 0) -> bool:
    """
    Returns true if the code is valid for the HMAC-based OTP of the secret at ``counter``.
    """
    return check_hotp(secret, code, digits, counter, window).valid
