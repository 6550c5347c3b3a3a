import hashlib
from typing import Any, Optional, Union

from . import utils
from .otp import DEFAULT_DIGITS, OTP, truncated_code


class HOTP(OTP):
    """
    Handler for HMAC-based OTP counters.

    The counter belongs to the caller: nothing here increments or stores it.
    Advance it exactly once per accepted code, otherwise the code can be
    replayed.
    """

    def __init__(
        self,
        s: str,
        digits: int = DEFAULT_DIGITS,
        digest: Any = None,
        name: Optional[str] = None,
        issuer: Optional[str] = None,
        initial_count: int = 0,
    ) -> None:
        """
        :param s: secret in base32 format
        :param initial_count: starting HMAC counter value, defaults to 0
        :param digits: number of integers in the OTP
        :param digest: digest function to use in the HMAC (expected to be SHA1)
        :param name: account name
        :param issuer: issuer
        """
        if digest is None:
            digest = hashlib.sha1
        self.initial_count = initial_count
        super().__init__(s=s, digits=digits, digest=digest, name=name, issuer=issuer)

    def at(self, count: int) -> str:
        """
        Generates the OTP for the given count.

        :param count: the OTP HMAC counter
        :returns: OTP
        """
        return self.generate_otp(self.initial_count + count)

    def match(self, otp: str, counter: int, window: int = 0) -> Optional[int]:
        """
        Looks for ``otp`` among the codes for ``counter`` up to ``counter + window``.

        :returns: the matching counter, or None
        """
        if window < 0:
            raise ValueError("window must not be negative")
        otp = str(otp)
        for candidate in range(counter, counter + window + 1):
            if utils.strings_equal(otp, self.at(candidate)):
                return candidate
        return None

    def verify(self, otp: str, counter: int, window: int = 0) -> bool:
        """
        Verifies the OTP passed in against the OTP for the given counter.

        :param otp: the OTP to check against
        :param counter: the OTP HMAC counter
        :param window: number of counters after ``counter`` also accepted,
            for clients that advanced without the server seeing it
        """
        return self.match(otp, counter, window) is not None

    def provisioning_uri(
        self,
        name: Optional[str] = None,
        initial_count: Optional[int] = None,
        issuer_name: Optional[str] = None,
        **kwargs,
    ) -> str:
        """
        Returns the provisioning URI for the OTP.

        :param name: name of the user account
        :param initial_count: starting HMAC counter value, defaults to the
            handler's own
        :param issuer_name: the name of the OTP issuer
        :returns: provisioning URI
        """
        return utils.build_uri(
            self.secret,
            name=name if name else self.name,
            initial_count=initial_count if initial_count is not None else self.initial_count,
            issuer=issuer_name if issuer_name else self.issuer,
            algorithm=self.digest().name,
            digits=self.digits,
            **kwargs,
        )


def create_hotp(key: str, counter: Union[int, str], digits: int = DEFAULT_DIGITS) -> str:
    """
    Creates a HOTP code from a hex key.

    :param key: the secret, hex encoded
    :param counter: the counter, as an int or a hex string of at most 8 bytes
    :param digits: the length of the code (e.g. 6 for 123006)
    :returns: code
    """
    return truncated_code(utils.hex_to_bytes(key), counter, digits)
