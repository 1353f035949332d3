"""Check digits for SSCC (GS1) and Luhn-style numbers."""

from __future__ import annotations

import argparse
import sys

SSCC_BODY_LENGTH = 17
EXAMPLE_SSCC_BODY = "13597920999999982"

_DIGITS = frozenset("0123456789")


def _digits_of(text: str) -> list[int]:
    for char in text:
        if char not in _DIGITS:
            raise ValueError(f"input contains a non-digit character: {char!r}")
    return [int(char) for char in text]


def calculate_check_digit(sscc_without_check_digit: str) -> int:
    """Return the GS1 check digit for a 17-digit SSCC body.

    Digits at even positions (counted from 0 on the left) weigh 3, the others 1.
    """
    if len(sscc_without_check_digit) != SSCC_BODY_LENGTH:
        raise ValueError(
            f"SSCC without check digit must be {SSCC_BODY_LENGTH} digits long"
        )
    digits = _digits_of(sscc_without_check_digit)
    total = sum(3 * d for d in digits[0::2]) + sum(digits[1::2])
    return (10 - total % 10) % 10


def calculate_luhn(number: str) -> int:
    """Return the Luhn check digit to append to ``number``."""
    total = 0
    for position, digit in enumerate(reversed(_digits_of(number))):
        if position % 2 == 0:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return (total * 9) % 10


def complete_sscc(sscc_without_check_digit: str) -> str:
    """Return the full 18-digit SSCC with its check digit appended."""
    check = calculate_check_digit(sscc_without_check_digit)
    return f"{sscc_without_check_digit}{check}"


def main(argv: list[str] | None = None) -> int:
    """Print the complete SSCC for a 17-digit body."""
    parser = argparse.ArgumentParser(
        description="Compute the check digit of an SSCC code."
    )
    parser.add_argument(
        "body",
        nargs="?",
        default=EXAMPLE_SSCC_BODY,
        help="the 17-digit SSCC without its check digit",
    )
    args = parser.parse_args(argv)
    try:
        full = complete_sscc(args.body)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    print(f"Full SSCC: {full}")
    return 0


if __name__ == "__main__":
    sys.exit(main())