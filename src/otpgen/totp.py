import datetime
import hashlib
import math
import time
from typing import Any, Optional, Union

from . import utils
from .otp import DEFAULT_DIGITS, OTP, truncated_code

DEFAULT_INTERVAL = 30

Timestamp = Union[int, float, datetime.datetime]


def _unix_seconds(for_time: Optional[Timestamp]) -> float:
    if for_time is None:
        return time.time()
    if isinstance(for_time, datetime.datetime):
        return for_time.timestamp()
    return float(for_time)


def time_step(for_time: Optional[Timestamp] = None, interval: int = DEFAULT_INTERVAL) -> int:
    """
    Returns the TOTP moving factor for a point in time.

    The time is rounded half-up to the nearest second before being divided
    into ``interval`` second steps.

    :param for_time: Unix seconds or a datetime (naive datetimes are local
        time); defaults to now
    :param interval: step length in seconds
    :returns: number of whole steps since the Unix epoch
    """
    if interval < 1:
        raise ValueError("interval must be a positive integer")
    seconds = math.floor(_unix_seconds(for_time) + 0.5)
    if seconds < 0:
        raise ValueError("time must not be before the Unix epoch")
    return seconds // interval


class TOTP(OTP):
    """
    Handler for time-based OTP counters.
    """

    def __init__(
        self,
        s: str,
        digits: int = DEFAULT_DIGITS,
        digest: Any = None,
        name: Optional[str] = None,
        issuer: Optional[str] = None,
        interval: int = DEFAULT_INTERVAL,
    ) -> None:
        """
        :param s: secret in base32 format
        :param digits: number of integers in the OTP
        :param digest: digest function to use in the HMAC (expected to be SHA1)
        :param name: account name
        :param issuer: issuer
        :param interval: the time interval in seconds for OTP, defaults to 30
        """
        if digest is None:
            digest = hashlib.sha1
        if interval < 1:
            raise ValueError("interval must be a positive integer")
        self.interval = interval
        super().__init__(s=s, digits=digits, digest=digest, name=name, issuer=issuer)

    def timecode(self, for_time: Optional[Timestamp] = None) -> int:
        return time_step(for_time, self.interval)

    def at(self, for_time: Optional[Timestamp] = None, counter_offset: int = 0) -> str:
        """
        Generates the OTP for the given time.

        :param for_time: Unix seconds or a datetime
        :param counter_offset: steps to add to the computed time step
        :returns: OTP value
        """
        return self.generate_otp(self.timecode(for_time) + counter_offset)

    def now(self) -> str:
        return self.at()

    def match(self, otp: str, for_time: Optional[Timestamp] = None, valid_window: int = 0) -> Optional[int]:
        """
        Looks for ``otp`` among the codes within ``valid_window`` steps of ``for_time``.

        :returns: the matching time step, or None
        """
        if valid_window < 0:
            raise ValueError("valid_window must not be negative")
        otp = str(otp)
        current = self.timecode(for_time)
        for step in range(max(current - valid_window, 0), current + valid_window + 1):
            if utils.strings_equal(otp, self.generate_otp(step)):
                return step
        return None

    def verify(self, otp: str, for_time: Optional[Timestamp] = None, valid_window: int = 0) -> bool:
        """
        Verifies the OTP passed in against the current time OTP.

        :param otp: the OTP to check against
        :param for_time: time to check OTP at (defaults to now)
        :param valid_window: extends the validity to this many counter ticks
            before and after the current one
        :returns: True if verification succeeded, False otherwise
        """
        return self.match(otp, for_time, valid_window) is not None

    def provisioning_uri(self, name: Optional[str] = None, issuer_name: Optional[str] = None, **kwargs) -> str:
        """
        Returns the provisioning URI for the OTP.

        :param name: name of the user account
        :param issuer_name: the name of the OTP issuer
        :returns: provisioning URI
        """
        return utils.build_uri(
            self.secret,
            name if name else self.name,
            issuer=issuer_name if issuer_name else self.issuer,
            algorithm=self.digest().name,
            digits=self.digits,
            period=self.interval,
            **kwargs,
        )


def create_totp(key: str, step: Union[int, str], digits: int = DEFAULT_DIGITS) -> str:
    """
    Creates a TOTP code from a hex key.

    The step is used exactly like a HOTP counter; see :func:`time_step` for
    deriving it from a timestamp.

    :param key: the secret, hex encoded
    :param step: the time step, as an int or a hex string of at most 8 bytes
    :param digits: the length of the code (e.g. 8 for 94287082)
    :returns: code
    """
    return truncated_code(utils.hex_to_bytes(key), step, digits)
