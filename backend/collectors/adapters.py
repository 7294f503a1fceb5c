"""
Discovery of Ethernet adapters in state 'Available'.

libperfstat only knows about an Ethernet device when an IP address is
configured on it, which is usually not the case for Shared Ethernet
Adapters on a VIOS. The adapter inventory is therefore scraped from
``lsdev -Cc adapter`` instead.
"""
import subprocess
import logging

from .network import Adapter

logger = logging.getLogger(__name__)

DEFAULT_LSDEV = '/usr/sbin/lsdev'


class DiscoveryError(Exception):
    """The adapter inventory could not be read consistently."""


def discover_adapters(min_sample_interval: float = 5.0,
                      lsdev_path: str = DEFAULT_LSDEV,
                      timeout: float = 10) -> list:
    """
    Discover all Ethernet adapters in state 'Available'.

    The adapter table is sized by a counting pass over the inventory and
    then filled from a second pass that extracts the names.

    Returns:
        list: Adapter objects in inventory order, empty if none were found

    Raises:
        DiscoveryError: the name pass returned fewer adapters than counted
    """
    count = count_adapters(lsdev_path, timeout)
    logger.debug(f"Found Ethernet adapters = {count}")

    if count == 0:
        return []

    names = list_adapter_names(lsdev_path, timeout)
    if len(names) < count:
        raise DiscoveryError(
            f"lsdev listed {len(names)} Ethernet adapters, expected {count}")

    adapters = [
        Adapter(name=name, min_sample_interval=min_sample_interval)
        for name in names[:count]
    ]
    for adapter in adapters:
        logger.debug(f"name = >{adapter.name}<")

    return adapters


def count_adapters(lsdev_path: str = DEFAULT_LSDEV, timeout: float = 10) -> int:
    """Count inventory lines describing an available Ethernet adapter."""
    return sum(1 for line in _run_lsdev(lsdev_path, timeout)
               if _is_available_ethernet(line))


def list_adapter_names(lsdev_path: str = DEFAULT_LSDEV, timeout: float = 10) -> list:
    """Return the names of available Ethernet adapters in inventory order."""
    return [line.split()[0] for line in _run_lsdev(lsdev_path, timeout)
            if _is_available_ethernet(line)]


def _is_available_ethernet(line: str) -> bool:
    """
    Match an ``lsdev -Cc adapter`` line against the adapter filter.

    Only the name and status columns are considered, so that words in
    the free-text description cannot produce a match.
    """
    parts = line.split()
    if len(parts) < 2:
        return False

    name_and_status = f"{parts[0]} {parts[1]}"
    return 'ent' in name_and_status and 'Available' in name_and_status


def _run_lsdev(lsdev_path: str, timeout: float) -> list:
    """
    Run the adapter inventory command.

    Returns:
        list: Output lines, empty if the command is unavailable or failed
    """
    try:
        result = subprocess.run(
            [lsdev_path, '-Cc', 'adapter'],
            capture_output=True,
            text=True,
            errors='replace',
            timeout=timeout
        )
    except subprocess.TimeoutExpired:
        logger.error("lsdev command timed out")
        return []
    except FileNotFoundError:
        logger.warning(f"{lsdev_path} not found - no Ethernet adapters discovered")
        return []
    except OSError as e:
        logger.error(f"Error running lsdev: {e}")
        return []

    if result.returncode != 0:
        logger.warning(f"lsdev command failed: {result.stderr.strip()}")
        return []

    return [line for line in result.stdout.splitlines() if line.strip()]
