"""Shared fixtures for the ibmnet monitor tests."""

from __future__ import annotations

import os

# app.py loads the plugin on import unless told otherwise
os.environ.setdefault("AUTOSTART", "false")

import pytest  # noqa: E402

# -- Realistic AIX command output -----------------------------------

LSDEV_OUTPUT = """\
ent0      Available 02-08 2-Port 10/100/1000 Base-TX PCI-X Adapter (14108902)
ent1      Available 02-09 2-Port 10/100/1000 Base-TX PCI-X Adapter (14108902)
ent2      Defined         Virtual I/O Ethernet Adapter (l-lan)
ent3      Available       Shared Ethernet Adapter
fcs0      Available 03-08 FC Adapter
vsa0      Available       LPAR Virtual Serial Adapter
"""

ENTSTAT_OUTPUT = """\
-------------------------------------------------------------
ETHERNET STATISTICS (ent0) :
Device Type: 2-Port 10/100/1000 Base-TX PCI-X Adapter (14108902)
Hardware Address: 00:14:5e:c2:4e:9e
Elapsed Time: 12 days 3 hours 44 minutes 11 seconds

Transmit Statistics:                          Receive Statistics:
--------------------                          -------------------
Packets: 8432111                              Packets: 9123456
Bytes: 1265814720                             Bytes: 2345678901
Interrupts: 0                                 Interrupts: 7654321
Transmit Errors: 0                            Receive Errors: 0
Packets Dropped: 0                            Packets Dropped: 0
                                              Bad Packets: 0
Broadcast Packets: 1024                       Broadcast Packets: 4096
"""


class FakeClock:
    """Manually advanced clock in seconds since boot."""

    def __init__(self, now: float = 100.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSampler:
    """Returns queued counter readings and records every call."""

    def __init__(self, readings: list | None = None) -> None:
        self.readings = list(readings or [])
        self.calls: list[tuple[str, float]] = []

    def __call__(self, name: str, timeout: float) -> dict:
        self.calls.append((name, timeout))
        reading = self.readings.pop(0)
        if isinstance(reading, Exception):
            raise reading
        return reading


def counters(bytes_received=None, bytes_sent=None, pkts_received=None, pkts_sent=None) -> dict:
    return {
        "bytes_received": bytes_received,
        "bytes_sent": bytes_sent,
        "pkts_received": pkts_received,
        "pkts_sent": pkts_sent,
    }


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


def fake_command(directory, name: str, output: bytes):
    """Write an executable that prints ``output`` verbatim, whatever its arguments."""
    data = directory / f"{name}.out"
    data.write_bytes(output)
    script = directory / name
    script.write_text(f"#!/bin/sh\ncat '{data}'\n")
    script.chmod(0o755)
    return str(script)
