import time
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import timedelta

import pandas as pd

def _seconds(duration) -> float:
    if isinstance(duration, timedelta):   # pd.Timedelta is a subclass
        return duration.total_seconds()
    return float(duration)

def estimate(observed_duration, observed_units: int, total_units: int) -> timedelta:
    """Linear extrapolation: observed_duration / observed_units * total_units.

    e.g. 60s for a 30-county sample -> 6000s for all 3000 counties.
    """
    if observed_units == 0:
        raise ZeroDivisionError("observed_units must be > 0 to extrapolate")
    if observed_units < 0 or total_units < 0:
        raise ValueError(f"Unit counts must be non-negative, got {observed_units} and {total_units}")
    seconds = _seconds(observed_duration)
    if seconds < 0:
        raise ValueError(f"observed_duration must be non-negative, got {observed_duration}")
    return timedelta(seconds=seconds / observed_units * total_units)

def estimate_table(observed_duration, observed_units: int, totals) -> pd.DataFrame:
    """One planning row per candidate run size."""
    rows = []
    for total in totals:
        est = estimate(observed_duration, observed_units, total)
        rows.append({"total_units": int(total),
                     "estimated_seconds": est.total_seconds(),
                     "estimated": pd.Timedelta(est)})
    return pd.DataFrame(rows, columns=["total_units", "estimated_seconds", "estimated"])

@dataclass(frozen=True)
class FetchStats:
    elapsed: timedelta
    units: int

    @property
    def per_unit(self) -> timedelta:
        return estimate(self.elapsed, self.units, 1)

    def estimate_total(self, total_units: int) -> timedelta:
        return estimate(self.elapsed, self.units, total_units)

class _Measurement:
    def __init__(self, units: int):
        self.units = int(units)
        self.stats = None

@contextmanager
def measure(units: int):
    """Time a block that fetches `units` units; `.stats` is set on exit.

        with measure(len(counties)) as m:
            ...
        m.stats.estimate_total(3000)
    """
    m = _Measurement(units)
    start = time.perf_counter()
    try:
        yield m
    finally:
        m.stats = FetchStats(elapsed=timedelta(seconds=time.perf_counter() - start), units=m.units)
