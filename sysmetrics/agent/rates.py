"""
Counter Rate Derivation.

Turns cumulative network byte counters into per-tick deltas.
"""

from dataclasses import dataclass
from typing import Optional


def counter_delta(previous: int, current: int) -> float:
    """Delta between two counter readings; wraps and resets clamp to zero."""
    delta = current - previous
    if delta < 0:
        return 0.0
    return float(delta)


@dataclass
class CounterState:
    """Last-seen cumulative byte counters, kept across reporting windows."""
    recv_bytes: int = 0
    sent_bytes: int = 0
    primed: bool = False


class NetworkRates:
    """
    Derives received/sent byte rates from successive counter totals.

    The first reading after start-up, or after a failed read, only
    establishes the baseline and yields nothing.
    """

    def __init__(self, state: Optional[CounterState] = None):
        self.state = state or CounterState()

    def observe(self, recv_bytes: int, sent_bytes: int) -> Optional[tuple[float, float]]:
        """Record a reading; return (recv, sent) deltas once primed."""
        state = self.state
        rates = None

        if state.primed:
            rates = (
                counter_delta(state.recv_bytes, recv_bytes),
                counter_delta(state.sent_bytes, sent_bytes),
            )

        state.recv_bytes = recv_bytes
        state.sent_bytes = sent_bytes
        state.primed = True
        return rates

    def invalidate(self) -> None:
        """Drop the baseline so the next reading primes again."""
        self.state.primed = False
