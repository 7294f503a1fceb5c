"""System boot time from the login records."""

import time
import struct
import logging

logger = logging.getLogger(__name__)

BOOT_TIME = 2

# struct utmp: type, pid, line, id, user, host, exit status,
# session, tv_sec, tv_usec, addr_v6, reserved
UTMP_RECORD = struct.Struct('<h2xi32s4s32s256shhiii16s20s')
_TYPE_FIELD = 0
_TV_SEC_FIELD = 9


def read_boot_time(utmp_path: str = '/var/run/utmp') -> float:
    """
    Return the boot time in seconds since the epoch.

    The glibc ``struct utmp`` layout is assumed. Falls back to the current
    time when the login records cannot be read or hold no plausible boot
    entry.
    """
    try:
        with open(utmp_path, 'rb') as f:
            while True:
                record = f.read(UTMP_RECORD.size)
                if len(record) < UTMP_RECORD.size:
                    break
                fields = UTMP_RECORD.unpack(record)
                if fields[_TYPE_FIELD] != BOOT_TIME:
                    continue
                boot_time = fields[_TV_SEC_FIELD]
                # Records in a different utmp layout decode to arbitrary values
                if 0 < boot_time <= time.time():
                    return float(boot_time)
                logger.debug(f"Ignoring implausible boot time {boot_time} in {utmp_path}")
    except OSError as e:
        logger.debug(f"Could not read {utmp_path}: {e}")
        return time.time()

    logger.debug(f"No boot record in {utmp_path}, using current time")
    return time.time()


def uptime_clock(boot_time: float):
    """Return a clock reporting wall-clock seconds since ``boot_time``."""
    def clock() -> float:
        return time.time() - boot_time

    return clock
