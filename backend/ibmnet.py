"""
gmond Python metric module reporting Ethernet adapter throughput on AIX.

libperfstat only knows about an Ethernet device if an IP address is
configured on it, which is usually not the case for Shared Ethernet
Adapters on a Virtual I/O Server. This module therefore discovers the
adapters with ``lsdev`` and reads their counters with ``entstat``.

Every adapter contributes four metrics named ``<adapter>_<kind>``:
bytes_received, bytes_sent, pkts_received and pkts_sent.
"""

import logging

from config import Config
from collectors import (
    AdapterPoller,
    DiscoveryError,
    KINDS,
    discover_adapters,
    read_boot_time,
    uptime_clock,
)

logger = logging.getLogger(__name__)

METRIC_GROUP = 'ibmnet'

# kind -> (description, units)
METRIC_INFO = {
    'bytes_received': ('Bytes Received', 'bytes/sec'),
    'bytes_sent': ('Bytes Sent', 'bytes/sec'),
    'pkts_received': ('Packets Received', 'packets/sec'),
    'pkts_sent': ('Packets Sent', 'packets/sec'),
}

_poller = None
_descriptors = []


def metric_name(adapter: str, kind: str) -> str:
    """Compose the host-visible metric name of an adapter counter."""
    return f"{adapter}_{kind}"


def resolve_metric(name: str, adapter_names: list):
    """
    Map a metric name back to ``(adapter index, kind)``.

    Adapter names may themselves contain underscores, so the name is
    matched against the known adapters (longest first) instead of being
    split.

    Returns:
        tuple or None: (index, kind), or None for an unknown name
    """
    candidates = sorted(enumerate(adapter_names), key=lambda item: len(item[1]), reverse=True)

    for index, adapter in candidates:
        prefix = f"{adapter}_"
        if not name.startswith(prefix):
            continue
        kind = name[len(prefix):]
        if kind in KINDS:
            return index, kind

    return None


def resolve(name: str):
    """Resolve a metric name against the adapters discovered by metric_init."""
    return _resolve(_poller, name)


def _resolve(poller, name: str):
    if poller is None:
        return None
    return resolve_metric(name, poller.adapter_names)


def metric_handler(name: str) -> float:
    """Return the current value of the named metric."""
    # metric_cleanup may run concurrently; work on one snapshot
    poller = _poller
    resolved = _resolve(poller, name)
    if resolved is None:
        logger.debug(f"Unknown metric {name}")
        return 0.0

    index, kind = resolved
    adapter = poller.adapters[index]
    value = poller.get_rate(adapter.name, kind)
    logger.debug(f"{name} = {value}")
    return value


def metric_handler_index(index: int) -> float:
    """Return the value of the metric at ``index`` in the descriptor list."""
    if not 0 <= index < len(_descriptors):
        return 0.0
    return metric_handler(_descriptors[index]['name'])


def build_descriptors(adapter_names: list, time_max: int = 60) -> list:
    """Return one metric descriptor per adapter and kind, grouped by kind."""
    descriptors = []

    for kind in KINDS:
        description, units = METRIC_INFO[kind]
        for adapter in adapter_names:
            descriptors.append({
                'name': metric_name(adapter, kind),
                'call_back': metric_handler,
                'time_max': time_max,
                'value_type': 'double',
                'units': units,
                'slope': 'both',
                'format': '%.1f',
                'description': f"{adapter} {description}",
                'groups': METRIC_GROUP,
            })

    return descriptors


def metric_init(params: dict = None) -> list:
    """
    Discover adapters, take the baseline sample and describe the metrics.

    ``params`` may override any key of Config.get_plugin_params(); gmond
    hands them over as strings.
    """
    global _poller, _descriptors

    settings = Config.get_plugin_params()
    for key, value in (params or {}).items():
        if key not in settings:
            logger.warning(f"Ignoring unknown parameter {key}")
            continue
        try:
            settings[key] = type(settings[key])(value)
        except (TypeError, ValueError):
            logger.warning(f"Invalid value {value!r} for parameter {key}, using {settings[key]!r}")

    try:
        adapters = discover_adapters(
            min_sample_interval=settings['min_sample_interval'],
            lsdev_path=settings['lsdev_path'],
            timeout=settings['discovery_timeout'],
        )
    except DiscoveryError as e:
        logger.error(f"Adapter discovery failed: {e}")
        adapters = []

    boot_time = read_boot_time(settings['utmp_path'])
    _poller = AdapterPoller(
        adapters,
        clock=uptime_clock(boot_time),
        sample_timeout=settings['sample_timeout'],
        entstat_path=settings['entstat_path'],
    )
    _descriptors = build_descriptors(_poller.adapter_names, settings['time_max'])

    _poller.prime()

    logger.info(f"ibmnet initialized with {len(adapters)} Ethernet adapters")
    return _descriptors


def metric_cleanup():
    """Drop all module state."""
    global _poller, _descriptors

    _poller = None
    _descriptors = []


def get_poller():
    return _poller


if __name__ == '__main__':
    import time

    logging.basicConfig(level=logging.DEBUG)

    descriptors = metric_init({})
    try:
        while True:
            for d in descriptors:
                value = d['call_back'](d['name'])
                print(f"value for {d['name']} is {d['format'] % value} {d['units']}")
            time.sleep(Config.MIN_SAMPLE_INTERVAL + 1)
    except KeyboardInterrupt:
        metric_cleanup()
