"""Watch the Wi-Fi state file and reconfigure the network when the SSID changes."""

from __future__ import annotations

import os
import subprocess
import sys
import time
from collections.abc import Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

WATCHED_FILE = "/Library/Preferences/SystemConfiguration/com.apple.wifi.message-tracer.plist"
SETTLE_SECONDS = 10


class SSIDNotFoundError(LookupError):
    """No SSID could be found in the interface summary."""


def extract_ssid(output: str) -> str:
    """Return the SSID from ``ipconfig getsummary`` output, or an empty string."""
    for line in output.split("\n"):
        if "SSID" in line and "BSSID" not in line:
            parts = line.split()
            for part, value in zip(parts, parts[2:]):
                if part == "SSID":
                    return value
    return ""


def _run(args: list[str]) -> str:
    return subprocess.run(
        args, stdout=subprocess.PIPE, stderr=subprocess.STDOUT, text=True, check=True
    ).stdout


def get_current_ssid() -> str:
    """Return the SSID the Wi-Fi interface is joined to."""
    ssid = extract_ssid(_run(["ipconfig", "getsummary", "en0"]))
    if not ssid:
        raise SSIDNotFoundError("SSID not found")
    return ssid


def default_network() -> None:
    """Switch Wi-Fi to DHCP and use the interface address as DNS server."""
    _run(["networksetup", "-setdhcp", "Wi-Fi"])
    time.sleep(SETTLE_SECONDS)
    _run(["bash", "-c", "networksetup -setdnsservers Wi-Fi $(ifconfig en0 | grep 'inet ' | awk '{print $2}')"])


def _office_network() -> None:
    _run(["networksetup", "-setmanual", "Wi-Fi", "10.110.15.228", "255.255.255.0", "10.110.15.254"])
    time.sleep(SETTLE_SECONDS)
    _run(["bash", "-c", "sudo route -n add -net 10.110.19.0 -netmask 255.255.255.0 10.110.15.254"])
    _run(["bash", "-c", "networksetup -setdnsservers Wi-Fi 10.110.15.228"])


_SCRIPTS: dict[str, Callable[[], None]] = {"txm": default_network, "Hairou_KUBO1015": _office_network}


def run_custom_script(ssid: str) -> None:
    """Apply the network configuration that belongs to ``ssid``."""
    _SCRIPTS.get(ssid, default_network)()


class _SSIDWatcher(FileSystemEventHandler):
    def __init__(
        self,
        path: str,
        on_change: Callable[[str], None] = run_custom_script,
        read_ssid: Callable[[], str] = get_current_ssid,
    ) -> None:
        super().__init__()
        self.path = os.path.abspath(path)
        self._on_change = on_change
        self._read_ssid = read_ssid
        self.last_ssid = ""

    def _handle(self, event: FileSystemEvent) -> None:
        if not event.is_directory and os.path.abspath(os.fsdecode(event.src_path)) == self.path:
            self.check()

    on_modified = on_deleted = _handle

    def check(self) -> str | None:
        """Run the script for a new SSID; return it, or None when unchanged."""
        try:
            ssid = self._read_ssid()
        except (OSError, subprocess.CalledProcessError, SSIDNotFoundError):
            ssid = ""
        if ssid == self.last_ssid:
            return None
        print(f"WiFi changed to {ssid}")
        try:
            self._on_change(ssid)
        except (OSError, subprocess.CalledProcessError):
            pass
        self.last_ssid = ssid
        return ssid


def switch_network(path: str = WATCHED_FILE) -> None:
    """Watch ``path`` until interrupted, reconfiguring on every SSID change."""
    handler = _SSIDWatcher(path)
    observer = Observer()
    observer.schedule(handler, os.path.dirname(handler.path), recursive=False)
    observer.start()
    try:
        while observer.is_alive():
            observer.join(1)
    except KeyboardInterrupt:
        pass
    finally:
        observer.stop()
        observer.join()


def main(argv: list[str] | None = None) -> int:
    """Run the Wi-Fi watcher on ``argv[0]`` or the default state file."""
    switch_network(argv[0] if argv else WATCHED_FILE)
    return 0


if __name__ == "__main__":
    sys.exit(main())