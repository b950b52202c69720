"""
Exact integer values
--------------------
An integer is kept as a sign plus its prime factorization, with the plain
integer cached alongside whenever its magnitude is at most MAX_ABS_VAL.

Multiplication and division only touch exponents, so products such as 30!
stay exact after their cache is dropped. Anything that needs the digits
(addition, sqrt, factorial, logarithms) requires the cache.
"""

from functools import lru_cache

from config import MAX_ABS_VAL, MAX_EXP_SUM, MAX_FACT_ARG


@lru_cache(maxsize=4096)
def factorize_small(x):
    """Prime factorization of x (x <= MAX_ABS_VAL) by trial division."""
    res = []
    if x <= 1:
        return ()
    p = 2
    while p * p <= x:
        if x % p == 0:
            e = 0
            while x % p == 0:
                x //= p
                e += 1
            res.append((p, e))
        p += 1 if p == 2 else 2
    if x > 1:
        res.append((x, 1))
    return tuple(res)


@lru_cache()
def primes_up_to(n):
    if n < 2:
        return ()
    is_prime = [True] * (n + 1)
    is_prime[0] = is_prime[1] = False
    i = 2
    while i * i <= n:
        if is_prime[i]:
            for j in range(i * i, n + 1, i):
                is_prime[j] = False
        i += 1
    return tuple(i for i in range(2, n + 1) if is_prime[i])


@lru_cache()
def factorial_factors(n):
    """Factorization of n! via Legendre's formula."""
    res = []
    for p in primes_up_to(MAX_FACT_ARG):
        if p > n:
            break
        e, t = 0, n
        while t:
            t //= p
            e += t
        if e:
            res.append((p, e))
    return tuple(res)


def factors_add(a, b):
    """Exponent-wise sum of two factorizations (a product)."""
    out = []
    i = j = 0
    while i < len(a) or j < len(b):
        if j == len(b) or (i < len(a) and a[i][0] < b[j][0]):
            out.append(a[i])
            i += 1
        elif i == len(a) or b[j][0] < a[i][0]:
            out.append(b[j])
            j += 1
        else:
            out.append((a[i][0], a[i][1] + b[j][1]))
            i += 1
            j += 1
    return tuple(out)


def factors_subtract(a, b):
    """Exponent-wise a - b, or None unless b divides a exactly."""
    out = []
    i = j = 0
    while i < len(a) or j < len(b):
        if j == len(b) or (i < len(a) and a[i][0] < b[j][0]):
            out.append(a[i])
            i += 1
        elif i == len(a) or b[j][0] < a[i][0]:
            return None
        else:
            e = a[i][1] - b[j][1]
            if e < 0:
                return None
            if e:
                out.append((a[i][0], e))
            i += 1
            j += 1
    return tuple(out)


def _small_magnitude(factors):
    prod = 1
    for p, e in factors:
        for _ in range(e):
            prod *= p
            if prod > MAX_ABS_VAL:
                return None
    return prod


class ExactValue:
    """
    sign in {-1, 0, 1}; factors as ascending (prime, exponent) pairs;
    cached is sign * |value| when |value| <= MAX_ABS_VAL, else None.

    A value built from an integer factorizes on first use of ``factors``;
    a value built from factors computes its cache up front. Either way the
    two views always describe the same number.
    """

    __slots__ = ("sign", "cached", "_factors")

    def __init__(self, sign, cached, factors=None):
        self.sign = sign
        self.cached = cached
        self._factors = factors

    @classmethod
    def zero(cls):
        return cls(0, 0, ())

    @classmethod
    def from_int(cls, v, no_negative=False):
        """Leaf/arithmetic constructor; None when out of bounds or a forbidden negative."""
        if no_negative and v < 0:
            return None
        if v == 0:
            return cls.zero()
        if abs(v) > MAX_ABS_VAL:
            return None
        return cls(1 if v > 0 else -1, v)

    @classmethod
    def from_factors(cls, sign, factors):
        """Normalize: recompute the cached integer, dropping it above the bound."""
        if sign == 0:
            return cls.zero()
        magnitude = _small_magnitude(factors)
        cached = None if magnitude is None else sign * magnitude
        return cls(sign, cached, tuple(factors))

    @property
    def factors(self):
        if self._factors is None:
            self._factors = factorize_small(abs(self.cached))
        return self._factors

    @property
    def has_int(self):
        return self.cached is not None

    @property
    def exp_sum(self):
        return sum(e for _, e in self.factors)

    def key(self):
        if self.sign == 0:
            return "0"
        if self.cached is not None:
            return f"#{self.cached}"
        body = "".join(f"{p}^{e}," for p, e in self.factors)
        return ("-" if self.sign < 0 else "+") + body

    def add(self, other):
        if self.cached is None or other.cached is None:
            return None
        r = self.cached + other.cached
        if abs(r) > MAX_ABS_VAL:
            return None
        return ExactValue.from_int(r)

    def subtract(self, other):
        if self.cached is None or other.cached is None:
            return None
        r = self.cached - other.cached
        if abs(r) > MAX_ABS_VAL:
            return None
        return ExactValue.from_int(r)

    def multiply(self, other, max_exp_sum=MAX_EXP_SUM):
        if self.sign == 0 or other.sign == 0:
            return ExactValue.zero()
        if self.cached is not None and other.cached is not None:
            r = self.cached * other.cached
            if abs(r) <= MAX_ABS_VAL:
                return ExactValue.from_int(r)
        factors = factors_add(self.factors, other.factors)
        if sum(e for _, e in factors) > max_exp_sum:
            return None
        return ExactValue.from_factors(self.sign * other.sign, factors)

    def divide(self, other):
        if other.sign == 0:
            return None
        if self.sign == 0:
            return ExactValue.zero()
        if self.cached is not None and other.cached is not None:
            if self.cached % other.cached:
                return None
            return ExactValue.from_int(self.cached // other.cached)
        factors = factors_subtract(self.factors, other.factors)
        if factors is None:
            return None
        return ExactValue.from_factors(self.sign * other.sign, factors)

    def __eq__(self, other):
        if not isinstance(other, ExactValue):
            return NotImplemented
        if self.sign != other.sign:
            return False
        if self.cached is not None or other.cached is not None:
            return self.cached == other.cached
        return self.factors == other.factors

    def __hash__(self):
        if self.cached is not None:
            return hash(self.cached)
        return hash((self.sign, self.factors))

    def __repr__(self):
        if self.cached is not None:
            return f"ExactValue({self.cached})"
        body = " * ".join(f"{p}^{e}" for p, e in self.factors)
        return f"ExactValue({'-' if self.sign < 0 else ''}{body})"
