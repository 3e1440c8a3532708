"""Complex number value type used by the escape-time evaluator."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Complex:
    """A complex value stored as a pair of float64 components."""

    re: float
    im: float

    @classmethod
    def from_pair(cls, pair: tuple[float, float]) -> "Complex":
        return cls(re=float(pair[0]), im=float(pair[1]))

    def __add__(self, other: "Complex") -> "Complex":
        return add(self, other)

    def __mul__(self, other: "Complex") -> "Complex":
        return multiply(self, other)

    def __str__(self) -> str:
        return f"{self.re} + i * {self.im}"


def add(a: Complex, b: Complex) -> Complex:
    """Component-wise sum of ``a`` and ``b``."""

    return Complex(re=a.re + b.re, im=a.im + b.im)


def multiply(a: Complex, b: Complex) -> Complex:
    # (a + ib) * (u + iw) = (a*u - b*w) + i(a*w + b*u)
    return Complex(
        re=a.re * b.re - a.im * b.im,
        im=a.re * b.im + a.im * b.re,
    )


def squared_magnitude(a: Complex) -> float:
    """Return ``|a|**2``; escape thresholds are compared against this value."""

    return a.re * a.re + a.im * a.im
