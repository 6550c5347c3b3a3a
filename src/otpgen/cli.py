"""Command-line front end: ``otpgen secret|totp|hotp|verify``."""

import argparse
import logging
import sys
from typing import List, Optional

import otpgen
from otpgen import utils
from otpgen.exceptions import OTPError

logger = logging.getLogger(__name__)


def _key_hex(args: argparse.Namespace) -> str:
    if args.hex_key:
        utils.hex_to_bytes(args.secret)
        return args.secret
    return utils.base32_to_hex(args.secret)


def cmd_secret(args: argparse.Namespace) -> int:
    if args.hex:
        print(otpgen.random_hex(args.length))
    else:
        print(otpgen.random_base32(args.length))
    return 0


def cmd_totp(args: argparse.Namespace) -> int:
    step = otpgen.time_step(args.time, args.interval)
    logger.debug("time step %d", step)
    print(otpgen.create_totp(_key_hex(args), step, args.digits))
    return 0


def cmd_hotp(args: argparse.Namespace) -> int:
    print(otpgen.create_hotp(_key_hex(args), args.counter, args.digits))
    return 0


def cmd_verify(args: argparse.Namespace) -> int:
    if args.counter is not None:
        result = otpgen.check_hotp(args.secret, args.code, args.digits, args.counter, args.window)
    else:
        result = otpgen.check_totp(args.secret, args.code, args.digits, args.time, args.window, args.interval)
    print(result.reason.value)
    return 0 if result else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="otpgen", description="Generate and verify HOTP/TOTP one-time passwords.")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("secret", help="print a new random secret")
    p.add_argument("--hex", action="store_true", help="hex instead of Base32")
    p.add_argument("--length", type=int, default=otpgen.SECRET_BYTES, help="number of random bytes")
    p.set_defaults(func=cmd_secret)

    for name, func, help_text in (("totp", cmd_totp, "print a time-based code"), ("hotp", cmd_hotp, "print a counter-based code")):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("secret", help="shared secret, Base32 unless --hex-key")
        p.add_argument("--hex-key", action="store_true", help="the secret is hex encoded")
        p.add_argument("-d", "--digits", type=int, default=6, help="length of the code")
        if name == "totp":
            p.add_argument("-t", "--time", type=float, default=None, help="Unix time, defaults to now")
            p.add_argument("--interval", type=int, default=30, help="time step in seconds")
        else:
            p.add_argument("-c", "--counter", type=int, required=True, help="HMAC counter")
        p.set_defaults(func=func)

    p = sub.add_parser("verify", help="check a code; exit status 0 when valid")
    p.add_argument("secret", help="shared secret, Base32")
    p.add_argument("code")
    p.add_argument("-d", "--digits", type=int, default=6, help="length of the code")
    p.add_argument("-c", "--counter", type=int, default=None, help="verify as HOTP at this counter")
    p.add_argument("-w", "--window", type=int, default=0, help="extra counters or time steps accepted")
    p.add_argument("-t", "--time", type=float, default=None, help="Unix time, defaults to now")
    p.add_argument("--interval", type=int, default=30, help="time step in seconds")
    p.set_defaults(func=cmd_verify)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return args.func(args)
    except (OTPError, ValueError) as exc:
        print("error: {}".format(exc), file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
