"""Monte Carlo simulation result — Domain layer."""

from dataclasses import dataclass


@dataclass(frozen=True)
class MonteCarloResult:
    """Summary of one simulated vote share distribution.

    ``samples`` is sorted ascending. ``median`` is ``samples[n // 2]``, so for
    an even sample count it is the upper of the two middle values rather than
    their average.
    """

    samples: tuple[float, ...]
    mean: float
    median: float
    lower: float
    upper: float
    standard_deviation: float
