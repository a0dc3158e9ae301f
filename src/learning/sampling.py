"""
Random draws for the selection strategies.

All randomness goes through one injected ``random.Random`` so a seeded
optimizer is reproducible. Gamma draws use Marsaglia and Tsang's method,
Normal draws use the Box-Muller transform and Beta draws are built from
two Gamma draws.
"""

import math
import random
from typing import Optional, Sequence, TypeVar


T = TypeVar("T")


class PosteriorSampler:
    """Seedable sampler for Beta, Gamma and Normal posteriors."""

    def __init__(self, rng: Optional[random.Random] = None, seed: Optional[int] = None):
        self.rng = rng or random.Random(seed)

    def uniform(self) -> float:
        """Uniform draw on [0, 1)."""
        return self.rng.random()

    def bernoulli(self, p: float) -> bool:
        return self.rng.random() < p

    def normal(self, mean: float = 0.0, stddev: float = 1.0) -> float:
        """Box-Muller transform."""
        # 1 - U keeps u1 in (0, 1] so the log is finite
        u1 = 1.0 - self.rng.random()
        u2 = self.rng.random()
        z = math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)
        return mean + stddev * z

    def gamma(self, shape: float, scale: float = 1.0) -> float:
        """Marsaglia-Tsang. For shape < 1 uses Gamma(shape + 1) * U^(1/shape)."""
        if shape <= 0:
            raise ValueError(f"Gamma shape must be positive, got {shape}")

        if shape < 1:
            u = 1.0 - self.rng.random()
            return self.gamma(shape + 1, scale) * u ** (1.0 / shape)

        d = shape - 1.0 / 3.0
        c = 1.0 / math.sqrt(9.0 * d)
        while True:
            x = self.normal()
            v = 1.0 + c * x
            while v <= 0:
                x = self.normal()
                v = 1.0 + c * x
            v = v * v * v
            u = 1.0 - self.rng.random()
            if u < 1 - 0.0331 * (x * x) * (x * x):
                return d * v * scale
            if math.log(u) < 0.5 * x * x + d * (1 - v + math.log(v)):
                return d * v * scale

    def beta(self, alpha: float, beta: float) -> float:
        """Beta(a, b) = Ga / (Ga + Gb)."""
        gamma_a = self.gamma(alpha)
        gamma_b = self.gamma(beta)
        total = gamma_a + gamma_b
        if total <= 0:
            return 0.5
        return gamma_a / total

    def choice(self, items: Sequence[T]) -> T:
        """Uniform pick."""
        return items[int(self.rng.random() * len(items)) % len(items)]

    def weighted_choice(self, items: Sequence[T], weights: Sequence[float]) -> int:
        """
        Weighted random pick.

        Args:
            items: Candidates
            weights: Non-negative weights, same length as items

        Returns:
            Index of the chosen item
        """
        total = sum(weights)
        remaining = self.rng.random() * total
        for index, weight in enumerate(weights):
            remaining -= weight
            if remaining <= 0:
                return index
        return len(items) - 1


def softmax(values: Sequence[float], temperature: float = 1.0) -> list[float]:
    """Numerically stable softmax."""
    if not values:
        return []
    max_value = max(values)
    exp_values = [math.exp((v - max_value) / temperature) for v in values]
    total = sum(exp_values)
    return [v / total for v in exp_values]
