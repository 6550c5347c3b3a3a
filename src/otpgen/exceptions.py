class OTPError(Exception):
    """
    Base class for errors raised while creating one-time passwords.
    """


class MalformedInputError(OTPError, ValueError):
    """
    Raised when a hex or Base32 string, or a moving factor, cannot be decoded.
    """


class UnsupportedTypeError(OTPError, ValueError):
    """
    Raised when an OTP type is neither HOTP nor TOTP.
    """


class CryptoInitError(OTPError):
    """
    Raised when the HMAC cannot be keyed, e.g. because the secret is empty.
    """
