"""Command-line entry point that starts the Wi-Fi watcher service."""

from __future__ import annotations

import sys

from sscctools import network


def main(argv: list[str] | None = None) -> int:
    """Start the Wi-Fi watcher; every argument, ``--service=switchnetwork`` included, leads there."""
    return network.main([])


if __name__ == "__main__":
    sys.exit(main())