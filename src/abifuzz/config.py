from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from abifuzz.exceptions import ConfigError


def _check_bounds(name: str, lo: int, hi: int) -> None:
    if lo < 0:
        raise ConfigError(f"{name}: minimum must be non-negative, got {lo}")
    if lo > hi:
        raise ConfigError(f"{name}: minimum {lo} exceeds maximum {hi}")


def _check_probability(name: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        raise ConfigError(f"{name}: must be within [0, 1], got {value}")


def clamp_bounds(lo: int, hi: int, cap: Optional[int]) -> Tuple[int, int]:
    """Restrict configured length bounds to a type's own maximum length."""
    if cap is None:
        return lo, hi
    return min(lo, cap), min(hi, cap)


@dataclass
class GeneratorConfig:
    """Length bounds for randomly generated dynamic values."""

    array_min_length: int = 0
    array_max_length: int = 10
    bytes_min_length: int = 0
    bytes_max_length: int = 100
    string_min_length: int = 0
    string_max_length: int = 100

    def __post_init__(self):
        _check_bounds("array length", self.array_min_length, self.array_max_length)
        _check_bounds("bytes length", self.bytes_min_length, self.bytes_max_length)
        _check_bounds(
            "string length", self.string_min_length, self.string_max_length
        )

    def array_bounds(self, cap: Optional[int] = None) -> Tuple[int, int]:
        return clamp_bounds(self.array_min_length, self.array_max_length, cap)

    def bytes_bounds(self, cap: Optional[int] = None) -> Tuple[int, int]:
        return clamp_bounds(self.bytes_min_length, self.bytes_max_length, cap)

    def string_bounds(self, cap: Optional[int] = None) -> Tuple[int, int]:
        return clamp_bounds(self.string_min_length, self.string_max_length, cap)


@dataclass
class MutationConfig:
    """Configuration for corpus reuse and mutation probabilities."""

    generator: GeneratorConfig = field(default_factory=GeneratorConfig)

    # Probability of drawing a leaf from the corpus instead of generating it
    address_bias: float = 0.5
    integer_bias: float = 0.5
    string_bias: float = 0.5
    bytes_bias: float = 0.5

    # Rounds per mutate call, drawn uniformly
    min_rounds: int = 0
    max_rounds: int = 1

    # Per-node choice weights (resize only applies to dynamic-length kinds)
    keep_weight: float = 0.3
    mutate_weight: float = 0.5
    regenerate_weight: float = 0.1
    resize_weight: float = 0.1

    # Largest length change a single resize applies
    resize_max_delta: int = 4

    def __post_init__(self):
        for name in ("address_bias", "integer_bias", "string_bias", "bytes_bias"):
            _check_probability(name, getattr(self, name))
        _check_bounds("mutation rounds", self.min_rounds, self.max_rounds)

        weights = (
            self.keep_weight,
            self.mutate_weight,
            self.regenerate_weight,
            self.resize_weight,
        )
        if any(w < 0 for w in weights):
            raise ConfigError(f"choice weights must be non-negative, got {weights}")
        if sum(weights) <= 0:
            raise ConfigError("at least one choice weight must be positive")
        if self.resize_max_delta < 1:
            raise ConfigError(
                f"resize_max_delta must be at least 1, got {self.resize_max_delta}"
            )


# Default configuration instances
DEFAULT_GENERATOR_CONFIG = GeneratorConfig()
DEFAULT_MUTATION_CONFIG = MutationConfig()
