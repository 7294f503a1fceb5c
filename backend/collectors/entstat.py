"""Per-adapter counter sampling via the AIX ``entstat`` command."""

import re
import subprocess
import logging

logger = logging.getLogger(__name__)

DEFAULT_ENTSTAT = '/usr/bin/entstat'

BYTES_RECEIVED = 'bytes_received'
BYTES_SENT = 'bytes_sent'
PKTS_RECEIVED = 'pkts_received'
PKTS_SENT = 'pkts_sent'

KINDS = (BYTES_RECEIVED, BYTES_SENT, PKTS_RECEIVED, PKTS_SENT)

# entstat prints transmit and receive statistics side by side:
#   Packets: 1234                     Packets: 5678
#   Bytes: 98765                      Bytes: 43210
# The first two matching lines carry (sent, received) in tokens 2 and 4.
_COUNTER_LINE = re.compile(r'Packets:|Bytes:')
_LINE_KINDS = (
    (PKTS_SENT, PKTS_RECEIVED),
    (BYTES_SENT, BYTES_RECEIVED),
)


class SampleTimeout(Exception):
    """entstat did not finish within the allowed time."""

    def __init__(self, adapter: str, timeout: float):
        super().__init__(f"entstat {adapter} exceeded {timeout}s")
        self.adapter = adapter
        self.timeout = timeout


def sample_adapter(adapter: str, timeout: float = 5.0,
                   entstat_path: str = DEFAULT_ENTSTAT) -> dict:
    """
    Read the cumulative counters of one adapter.

    Returns:
        dict: Counter values keyed by kind; None where the value could not be read

    Raises:
        SampleTimeout: entstat ran longer than ``timeout`` and was killed
    """
    try:
        result = subprocess.run(
            [entstat_path, adapter],
            capture_output=True,
            text=True,
            errors='replace',
            timeout=timeout
        )
    except subprocess.TimeoutExpired:
        raise SampleTimeout(adapter, timeout)
    except FileNotFoundError:
        logger.debug(f"{entstat_path} not found")
        return {kind: None for kind in KINDS}
    except OSError as e:
        logger.debug(f"Error running entstat for {adapter}: {e}")
        return {kind: None for kind in KINDS}

    if result.returncode != 0:
        logger.debug(f"entstat {adapter} exited with {result.returncode}: {result.stderr.strip()}")

    return parse_entstat_output(result.stdout)


def parse_entstat_output(output: str) -> dict:
    """
    Extract packet and byte counters from entstat output.

    Line one yields the packet pair, line two the byte pair. A line that
    does not parse leaves both of its values as None.
    """
    counters = {kind: None for kind in KINDS}

    lines = [line for line in output.splitlines() if _COUNTER_LINE.search(line)]

    for line, (sent_kind, received_kind) in zip(lines[:2], _LINE_KINDS):
        parts = line.split()
        try:
            sent = int(parts[1])
            received = int(parts[3])
        except (IndexError, ValueError):
            logger.debug(f"Unparsable entstat line: {line!r}")
            continue

        counters[sent_kind] = sent
        counters[received_kind] = received

    return counters
