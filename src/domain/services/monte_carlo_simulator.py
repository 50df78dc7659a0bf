"""Monte Carlo simulation of vote share distributions."""

import math

import numpy as np
import numpy.typing as npt

from src.domain.utils.descriptive_stats import sample_standard_deviation
from src.domain.value_objects.monte_carlo_result import MonteCarloResult


class MonteCarloSimulator:
    """Draws normal samples around a projected vote share.

    Each simulator owns a ``numpy.random.Generator``. Pass a seed (or a
    generator) for reproducible output; use :meth:`spawn` to derive
    independent streams for per-party work.
    """

    DEFAULT_ITERATIONS = 10000
    DEFAULT_CONFIDENCE_LEVEL = 0.95
    MAX_VOTE_SHARE = 100.0

    def __init__(self, rng: np.random.Generator | int | None = None) -> None:
        if isinstance(rng, np.random.Generator):
            self._rng = rng
        else:
            self._rng = np.random.default_rng(rng)

    def spawn(self) -> "MonteCarloSimulator":
        """Return a simulator with an independent child stream."""
        return MonteCarloSimulator(self._rng.spawn(1)[0])

    def standard_normal(self, size: int) -> npt.NDArray[np.float64]:
        """Standard normal variates via the Box-Muller transform."""
        # random() is in [0, 1); 1 - random() is in (0, 1] so log never sees 0.
        u1 = 1.0 - self._rng.random(size)
        u2 = self._rng.random(size)
        return np.sqrt(-2.0 * np.log(u1)) * np.cos(2.0 * np.pi * u2)

    def simulate(
        self,
        base_value: float,
        volatility: float,
        trend_adjustment: float = 0.0,
        iterations: int = DEFAULT_ITERATIONS,
        confidence_level: float = DEFAULT_CONFIDENCE_LEVEL,
        max_vote_share: float = MAX_VOTE_SHARE,
    ) -> MonteCarloResult:
        """Simulate the distribution of a vote share.

        Each sample is ``base_value + trend_adjustment + z * volatility``
        clamped to ``[0, max_vote_share]``.

        Args:
            base_value: Projected vote share
            volatility: Standard deviation of the noise
            trend_adjustment: Additive offset applied to every sample
            iterations: Number of samples
            confidence_level: Coverage of the [lower, upper] interval
            max_vote_share: Upper clamp for a sample

        Returns:
            MonteCarloResult with samples sorted ascending

        Raises:
            ValueError: If iterations is less than 1
        """
        if iterations < 1:
            raise ValueError("iterations must be at least 1")

        center = base_value + trend_adjustment
        samples = np.sort(
            np.clip(
                center + self.standard_normal(iterations) * volatility,
                0.0,
                max_vote_share,
            )
        )

        n = samples.size
        tail = (1 - confidence_level) / 2
        lower_idx = min(n - 1, math.floor(n * tail))
        upper_idx = min(n - 1, math.floor(n * (1 - tail)))

        return MonteCarloResult(
            samples=tuple(samples.tolist()),
            mean=float(samples.mean()),
            median=float(samples[n // 2]),
            lower=float(samples[lower_idx]),
            upper=float(samples[upper_idx]),
            standard_deviation=sample_standard_deviation(samples),
        )
