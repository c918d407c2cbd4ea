"""Closed-form polynomial root solving.

Every curve operation in the pipeline (bounds, line/curve intersection,
ray crossings) reduces to finding the real roots of a polynomial of degree
three or less. This module solves them in closed form, then refines each
closed-form root with a few Newton steps.

All functions are pure and stateless.
"""

import math

EPSILON = 1e-9
"""Band around zero for leading coefficients and discriminants."""

_NEWTON_STEPS = 4


def _cbrt(value: float) -> float:
    """Real cube root, preserving sign."""
    return math.copysign(abs(value) ** (1.0 / 3.0), value)


def _polish(coefficients: tuple[float, ...], root: float) -> float:
    """Refine a root with a bounded number of Newton iterations.

    A step is only accepted if it reduces the residual, so a polished root is
    never worse than the closed-form one.
    """
    def evaluate(t: float) -> tuple[float, float]:
        value = 0.0
        slope = 0.0
        for coefficient in coefficients:
            slope = slope * t + value
            value = value * t + coefficient
        return value, slope

    value, slope = evaluate(root)
    for _ in range(_NEWTON_STEPS):
        if value == 0.0 or abs(slope) < EPSILON:
            break
        candidate = root - value / slope
        candidate_value, candidate_slope = evaluate(candidate)
        if abs(candidate_value) >= abs(value):
            break
        root, value, slope = candidate, candidate_value, candidate_slope
    return root


def solve_linear(a: float, b: float, eps: float = EPSILON) -> list[float]:
    """Solve a*t + b = 0.

    Returns:
        The single root, or an empty list if a is (nearly) zero
    """
    if abs(a) < eps:
        return []
    return [-b / a]


def solve_quadratic(a: float, b: float, c: float, eps: float = EPSILON) -> list[float]:
    """Find the real roots of a*t^2 + b*t + c = 0.

    Falls back to the linear solver when the leading coefficient is within
    ``eps`` of zero. A discriminant within ``eps`` of zero yields one double
    root.

    Args:
        a: Quadratic coefficient
        b: Linear coefficient
        c: Constant term
        eps: Tolerance band around zero

    Returns:
        Zero, one or two real roots in ascending order

    Examples:
        >>> solve_quadratic(1.0, -3.0, 2.0)
        [1.0, 2.0]
        >>> solve_quadratic(1.0, 0.0, 1.0)
        []
    """
    if abs(a) < eps:
        return solve_linear(b, c, eps)

    discriminant = b * b - 4.0 * a * c
    if abs(discriminant) <= eps:
        return [-b / (2.0 * a)]
    if discriminant < 0.0:
        return []

    # Avoid cancellation between -b and the square root
    q = -0.5 * (b + math.copysign(math.sqrt(discriminant), b))
    roots = [q / a, c / q]
    return sorted(_polish((a, b, c), root) for root in roots)


def solve_cubic(a: float, b: float, c: float, d: float, eps: float = EPSILON) -> list[float]:
    """Find the real roots of a*t^3 + b*t^2 + c*t + d = 0.

    Uses Cardano's method when there is one real root and the trigonometric
    form when there are three. Double and triple roots are handled as
    explicit branches of the depressed cubic.

    Args:
        a: Cubic coefficient
        b: Quadratic coefficient
        c: Linear coefficient
        d: Constant term
        eps: Tolerance band around zero

    Returns:
        Zero to three real roots in ascending order

    Examples:
        >>> [round(r, 9) for r in solve_cubic(1.0, -6.0, 11.0, -6.0)]
        [1.0, 2.0, 3.0]
    """
    if abs(a) < eps:
        return solve_quadratic(b, c, d, eps)

    # Normalize to t^3 + B t^2 + C t + D, then depress with t = u - B/3
    big_b, big_c, big_d = b / a, c / a, d / a
    offset = -big_b / 3.0
    p = big_c - big_b * big_b / 3.0
    q = 2.0 * big_b ** 3 / 27.0 - big_b * big_c / 3.0 + big_d
    discriminant = q * q / 4.0 + p ** 3 / 27.0

    if abs(discriminant) < eps:
        if abs(q) < eps:
            # Triple root
            roots = [offset]
        else:
            u = _cbrt(-q / 2.0)
            roots = [2.0 * u + offset, -u + offset]
    elif discriminant > 0.0:
        root_disc = math.sqrt(discriminant)
        u = _cbrt(-q / 2.0 + root_disc)
        v = _cbrt(-q / 2.0 - root_disc)
        roots = [u + v + offset]
    else:
        # Three distinct real roots; p < 0 here
        radius = 2.0 * math.sqrt(-p / 3.0)
        cos_arg = (3.0 * q / (2.0 * p)) * math.sqrt(-3.0 / p)
        phi = math.acos(max(-1.0, min(1.0, cos_arg)))
        roots = [
            radius * math.cos(phi / 3.0 - 2.0 * math.pi * k / 3.0) + offset
            for k in range(3)
        ]

    coefficients = (1.0, big_b, big_c, big_d)
    return sorted(_polish(coefficients, root) for root in roots)
