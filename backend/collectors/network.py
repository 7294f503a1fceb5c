"""Network throughput rates computed from cumulative adapter counters."""

import time
import logging
import threading

from .entstat import KINDS, SampleTimeout, sample_adapter, DEFAULT_ENTSTAT

logger = logging.getLogger(__name__)

DISABLED_RATE = -1.0


class Adapter:
    """An Ethernet adapter found at startup."""

    def __init__(self, name: str, enabled: bool = True,
                 last_sample_time: float = 0.0,
                 min_sample_interval: float = 5.0):
        self.name = name
        self.enabled = enabled
        self.last_sample_time = last_sample_time
        self.min_sample_interval = min_sample_interval

    def __repr__(self):
        return f"Adapter({self.name!r}, enabled={self.enabled})"


class CounterSeries:
    """Rate state for one cumulative counter of one adapter."""

    def __init__(self):
        self.last_rate = 0.0
        self.current_rate = 0.0
        self.last_total = 0

    def update(self, value: int, delta_t: float):
        """
        Fold a new cumulative reading into the rate.

        A reading below the previous total means the counter was reset or
        wrapped; the previous rate is carried forward instead.
        """
        delta = value - self.last_total

        if delta < 0:
            self.current_rate = self.last_rate
        else:
            self.current_rate = delta / delta_t

        self.last_rate = self.current_rate
        self.last_total = value

    def reset_rate(self):
        self.current_rate = 0.0
        self.last_rate = 0.0


class AdapterPoller:
    """
    Owns the adapter table and the counter series of every adapter.

    entstat is only run when the adapter's last sample is older than its
    minimum sample interval; otherwise the cached rate is returned. An
    adapter whose entstat run times out is disabled for the lifetime of
    the process and reports DISABLED_RATE from then on.
    """

    def __init__(self, adapters: list, sampler=None, clock=None,
                 sample_timeout: float = 5.0,
                 entstat_path: str = DEFAULT_ENTSTAT):
        self.adapters = list(adapters)
        self.sample_timeout = sample_timeout
        self._entstat_path = entstat_path
        self._sampler = sampler or self._run_entstat
        self._clock = clock or time.time

        self._by_name = {adapter.name: adapter for adapter in self.adapters}
        self._series = {
            adapter.name: {kind: CounterSeries() for kind in KINDS}
            for adapter in self.adapters
        }
        # Serializes sampling per adapter; host handlers may run in several threads
        self._locks = {adapter.name: threading.Lock() for adapter in self.adapters}

    @property
    def adapter_names(self) -> list:
        return [adapter.name for adapter in self.adapters]

    def adapter(self, name: str) -> Adapter:
        return self._by_name[name]

    def series(self, name: str, kind: str) -> CounterSeries:
        return self._series[name][kind]

    def prime(self):
        """
        Take the initial sample of every adapter.

        The first reading only establishes the baseline totals, so every
        rate is zeroed afterwards.
        """
        now = self._clock()
        for adapter in self.adapters:
            with self._locks[adapter.name]:
                self._sample(adapter, 1.0, now)
                for series in self._series[adapter.name].values():
                    series.reset_rate()

    def get_rate(self, name: str, kind: str) -> float:
        """Return the current rate of ``kind`` for adapter ``name`` in units/sec."""
        adapter = self._by_name[name]

        with self._locks[name]:
            if not adapter.enabled:
                return DISABLED_RATE

            now = self._clock()
            delta_t = now - adapter.last_sample_time

            if delta_t > adapter.min_sample_interval:
                self._sample(adapter, delta_t, now)

            if not adapter.enabled:
                return DISABLED_RATE

            return self._series[name][kind].current_rate

    def status(self) -> list:
        """Return a snapshot of every adapter for reporting."""
        return [
            {
                'name': adapter.name,
                'enabled': adapter.enabled,
                'last_sample_time': adapter.last_sample_time,
                'min_sample_interval': adapter.min_sample_interval,
            }
            for adapter in self.adapters
        ]

    def _sample(self, adapter: Adapter, delta_t: float, now: float):
        try:
            counters = self._sampler(adapter.name, self.sample_timeout)
        except SampleTimeout:
            adapter.enabled = False
            logger.warning(f"Ganglia gmond module ibmnet: Disabling Ethernet adapter {adapter.name}.")
            return

        series = self._series[adapter.name]
        for kind in KINDS:
            value = counters.get(kind)
            if value is None:
                continue
            logger.debug(f"{kind}({adapter.name}): read_val = {value}, "
                         f"last_val = {series[kind].last_total}, delta_t = {delta_t}")
            series[kind].update(value, delta_t)

        adapter.last_sample_time = now

    def _run_entstat(self, name: str, timeout: float) -> dict:
        return sample_adapter(name, timeout, self._entstat_path)
