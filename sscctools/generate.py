"""Generate ranges of SSCC codes and write them to a file."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterable, Iterator
from concurrent.futures import ThreadPoolExecutor

from sscctools.check import complete_sscc

FIXED_DIGIT = "1"
COMPANY_CODE = "1111110"
START_SERIAL = 100_000_000
END_SERIAL = START_SERIAL + 10_000 - 1
OUTPUT_FILE = "/tmp/sscc.txt"


def generate_codes(
    start: int = START_SERIAL,
    end: int = END_SERIAL,
    fixed_digit: str = FIXED_DIGIT,
    company_code: str = COMPANY_CODE,
    workers: int | None = None,
) -> Iterator[str]:
    """Yield complete SSCC codes for serials ``start`` to ``end`` inclusive, in order.

    Raises ValueError if a code body is not 17 digits.
    """
    workers = workers or (os.cpu_count() or 1) * 3
    prefix = f"{fixed_digit}{company_code}"
    with ThreadPoolExecutor(max_workers=workers) as executor:
        yield from executor.map(
            lambda serial: complete_sscc(f"{prefix}{serial:09d}"),
            range(start, end + 1),
        )


def write_codes(path: str | os.PathLike[str], codes: Iterable[str]) -> int:
    """Write one code per line to ``path`` and return how many were written."""
    count = 0
    with open(path, "w", encoding="ascii") as handle:
        for count, code in enumerate(codes, 1):
            handle.write(f"{code}\n")
    return count


def main(argv: list[str] | None = None) -> int:
    """Generate the configured SSCC range into the output file (or ``argv[0]``)."""
    path = argv[0] if argv else OUTPUT_FILE
    try:
        write_codes(path, generate_codes())
    except (OSError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())