"""Mersenne Twister random number generator with common distributions."""

from __future__ import annotations

import math
import os
import sys
from typing import List, Optional

from thcore.general import arg_check, raise_error

STATE_N = 624
STATE_M = 397

_MATRIX_A = 0x9908B0DF
_UPPER_MASK = 0x80000000
_LOWER_MASK = 0x7FFFFFFF
_WORD_MASK = 0xFFFFFFFF
_SEED_MASK = 0xFFFFFFFFFFFFFFFF
_TWO_POW_32 = 4294967296.0


def _twist(u: int, v: int) -> int:
    mixed = (u & _UPPER_MASK) | (v & _LOWER_MASK)
    return (mixed >> 1) ^ (_MATRIX_A if v & 1 else 0)


class Generator:
    """A single stream of random numbers (MT19937)."""

    def __init__(self, seed: Optional[int] = None) -> None:
        self._reset()
        if seed is None:
            self.seed()
        else:
            self.manual_seed(seed)

    def _reset(self) -> None:
        self._initial_seed = 0
        self._left = 1
        self._seeded = False
        self._next = 0
        self._state: List[int] = [0] * STATE_N
        self._normal_x = 0.0
        self._normal_y = 0.0
        self._normal_rho = 0.0
        self._normal_is_valid = False

    def copy(self) -> "Generator":
        """Return an independent generator in the same state."""
        clone = Generator.__new__(Generator)
        clone._reset()
        return clone.copy_from(self)

    def copy_from(self, other: "Generator") -> "Generator":
        """Take over the full state of ``other`` and return self."""
        self._initial_seed = other._initial_seed
        self._left = other._left
        self._seeded = other._seeded
        self._next = other._next
        self._state = list(other._state)
        self._normal_x = other._normal_x
        self._normal_y = other._normal_y
        self._normal_rho = other._normal_rho
        self._normal_is_valid = other._normal_is_valid
        return self

    def is_valid(self) -> bool:
        """Check that the generator is seeded and its state is consistent."""
        return (
            self._seeded
            and 0 < self._left <= STATE_N
            and self._next <= STATE_N
        )

    def seed(self) -> int:
        """Seed from the operating system's entropy source and return the seed."""
        try:
            raw = os.urandom(8)
        except (OSError, NotImplementedError):
            raise_error("Unable to read from /dev/urandom")
        value = int.from_bytes(raw, sys.byteorder)
        self.manual_seed(value)
        return value

    def manual_seed(self, seed: int) -> None:
        """Reset every part of the state and seed with ``seed``."""
        self._reset()
        self._initial_seed = int(seed) & _SEED_MASK
        state = self._state
        state[0] = self._initial_seed & _WORD_MASK
        for j in range(1, STATE_N):
            prev = state[j - 1]
            state[j] = (1812433253 * (prev ^ (prev >> 30)) + j) & _WORD_MASK
        self._left = 1
        self._seeded = True

    def initial_seed(self) -> int:
        """Return the seed the generator was last seeded with."""
        return self._initial_seed

    def _next_state(self) -> None:
        state = self._state
        self._left = STATE_N
        self._next = 0
        for k in range(STATE_N - STATE_M):
            state[k] = state[k + STATE_M] ^ _twist(state[k], state[k + 1])
        for k in range(STATE_N - STATE_M, STATE_N - 1):
            state[k] = state[k + STATE_M - STATE_N] ^ _twist(state[k], state[k + 1])
        state[STATE_N - 1] = state[STATE_M - 1] ^ _twist(state[STATE_N - 1], state[0])

    def random(self) -> int:
        """Return a uniformly distributed 32-bit unsigned integer."""
        self._left -= 1
        if self._left == 0:
            self._next_state()
        y = self._state[self._next]
        self._next += 1

        y ^= y >> 11
        y ^= (y << 7) & 0x9D2C5680
        y ^= (y << 15) & 0xEFC60000
        y ^= y >> 18
        return y & _WORD_MASK

    def _unit(self) -> float:
        return self.random() * (1.0 / _TWO_POW_32)

    def uniform(self, a: float = 0.0, b: float = 1.0) -> float:
        """Return a number uniformly drawn from [a, b)."""
        return self._unit() * (b - a) + a

    def normal(self, mean: float = 0.0, stdv: float = 1.0) -> float:
        """Return a normally distributed number (Box-Muller, values come in pairs)."""
        arg_check(stdv > 0, 2, "standard deviation must be strictly positive")
        if not self._normal_is_valid:
            self._normal_x = self._unit()
            self._normal_y = self._unit()
            self._normal_rho = math.sqrt(-2.0 * math.log(1.0 - self._normal_y))
            self._normal_is_valid = True
            return self._normal_rho * math.cos(2.0 * math.pi * self._normal_x) * stdv + mean
        self._normal_is_valid = False
        return self._normal_rho * math.sin(2.0 * math.pi * self._normal_x) * stdv + mean

    def exponential(self, lambd: float) -> float:
        """Return a number drawn from the density lambd * exp(-lambd * x)."""
        return -1.0 / lambd * math.log(1.0 - self._unit())

    def cauchy(self, median: float, sigma: float) -> float:
        """Return a number drawn from a Cauchy distribution."""
        return median + sigma * math.tan(math.pi * (self._unit() - 0.5))

    def log_normal(self, mean: float, stdv: float) -> float:
        """Return a number from the log-normal distribution with this mean and deviation."""
        zm = mean * mean
        zs = stdv * stdv
        arg_check(stdv > 0, 2, "standard deviation must be strictly positive")
        return math.exp(
            self.normal(math.log(zm / math.sqrt(zs + zm)), math.sqrt(math.log(zs / zm + 1)))
        )

    def geometric(self, p: float) -> int:
        """Return i >= 1 with probability (1 - p) * p**(i - 1)."""
        arg_check(0 < p < 1, 1, "must be > 0 and < 1")
        return int(math.log(1.0 - self._unit()) / math.log(p)) + 1

    def bernoulli(self, p: float) -> bool:
        """Return True with probability p."""
        arg_check(0 <= p <= 1, 1, "must be >= 0 and <= 1")
        return self._unit() <= p

    def __repr__(self) -> str:
        return f"Generator(initial_seed={self._initial_seed})"