"""Ethernet adapter collectors for the ibmnet monitor."""

from .adapters import discover_adapters, DiscoveryError
from .boottime import read_boot_time, uptime_clock
from .entstat import KINDS, SampleTimeout, sample_adapter, parse_entstat_output
from .network import Adapter, AdapterPoller, CounterSeries, DISABLED_RATE

__all__ = [
    'discover_adapters',
    'DiscoveryError',
    'read_boot_time',
    'uptime_clock',
    'KINDS',
    'SampleTimeout',
    'sample_adapter',
    'parse_entstat_output',
    'Adapter',
    'AdapterPoller',
    'CounterSeries',
    'DISABLED_RATE',
]
