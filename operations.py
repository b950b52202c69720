"""
Operation catalog
-----------------
Unary and binary transformations over DerivationNodes. Every try_* function
returns the new node, or None when the branch is not viable (out of budget,
not exact, trivially redundant). None is an outcome here, not an error.

Postfix tokens: integers, "+ - * /", "log" (a b log = log_a(b)),
and the unary "sqrt", "!", "lg" (log10), "lb" (log2).
"""

from math import isqrt

from config import (
    F_CNT, F_FACT, F_LB, F_LG, F_LOG, F_SQRT,
    MAX_ABS_VAL, MAX_EXP_SUM, MAX_FACT_ARG,
)
from exact_value import ExactValue, factorial_factors

UNARY_TOKENS = {"sqrt": F_SQRT, "!": F_FACT, "lg": F_LG, "lb": F_LB}
BINARY_TOKENS = ("+", "-", "*", "/", "log")
ZERO_USES = (0,) * F_CNT


def is_unary_token(t):
    return t in UNARY_TOKENS


def is_binary_token(t):
    return t in BINARY_TOKENS


class DerivationNode:
    """One element of a search state: a value and how it was derived."""

    __slots__ = ("value", "expr", "used", "depth")

    def __init__(self, value, expr, used=ZERO_USES, depth=0):
        self.value = value
        self.expr = expr
        self.used = used
        self.depth = depth

    @classmethod
    def leaf(cls, v, config):
        value = ExactValue.from_int(v, no_negative=config.no_negative)
        if value is None:
            return None
        return cls(value, (str(v),))

    def key(self):
        uses = ",".join(str(u) for u in self.used)
        return f"{self.value.key()}|{uses},D{self.depth}"

    def __repr__(self):
        return f"DerivationNode({self.value!r}, {' '.join(self.expr)!r})"


# --- Value rules (no budgets, no pruning) ---

def sqrt_value(v):
    """Exact square root of a cached non-negative value."""
    if v.cached is None or v.cached < 0:
        return None
    r = isqrt(v.cached)
    if r * r != v.cached:
        return None
    return ExactValue.from_int(r)


def factorial_value(v):
    if v.cached is None or v.cached < 0 or v.cached > MAX_FACT_ARG:
        return None
    if v.cached < 2:
        return ExactValue.from_int(1)
    return ExactValue.from_factors(1, factorial_factors(v.cached))


def log10_value(v):
    if v.cached is None or v.cached <= 0:
        return None
    x, k = v.cached, 0
    while x % 10 == 0:
        x //= 10
        k += 1
    if x != 1:
        return None
    return ExactValue.from_int(k)


def log2_value(v):
    if v.cached is None or v.cached <= 0:
        return None
    x = v.cached
    if x & (x - 1):
        return None
    return ExactValue.from_int(x.bit_length() - 1)


def log_value(a, b):
    """k such that a**k == b, for a >= 2 and b >= 1."""
    if a.cached is None or b.cached is None:
        return None
    if a.cached < 2 or b.cached <= 0:
        return None
    if b.cached == 1:
        return ExactValue.from_int(0)
    k, cur = 0, 1
    while cur < b.cached:
        cur *= a.cached
        k += 1
        if cur > MAX_ABS_VAL:
            break
    if cur != b.cached:
        return None
    return ExactValue.from_int(k)


# --- Budget helpers ---

def _inc_used(a, func, config):
    if a.used[func] + 1 > config.max_use(func):
        return None
    used = list(a.used)
    used[func] += 1
    return tuple(used)


def _merge_used(a, b, config):
    used = tuple(x + y for x, y in zip(a.used, b.used))
    for func, count in enumerate(used):
        if count > config.max_use(func):
            return None
    return used


def _unary(a, func, config):
    """Shared budget checks; returns the new (used, depth) or None."""
    if a.depth + 1 > config.max_nest:
        return None
    used = _inc_used(a, func, config)
    if used is None or a.value.cached is None:
        return None
    return used, a.depth + 1


def _checked(value, config):
    if value is None:
        return None
    if config.no_negative and value.sign < 0:
        return None
    return value


# --- Unary transforms ---

def try_sqrt(a, config):
    budget = _unary(a, F_SQRT, config)
    if budget is None:
        return None
    if a.value.cached in (0, 1):
        return None
    value = _checked(sqrt_value(a.value), config)
    if value is None:
        return None
    return DerivationNode(value, a.expr + ("sqrt",), *budget)


def try_fact(a, config):
    budget = _unary(a, F_FACT, config)
    if budget is None:
        return None
    if a.value.cached in (0, 1, 2, 4):
        return None
    value = factorial_value(a.value)
    if value is None:
        return None
    if value.cached is None and value.exp_sum > MAX_EXP_SUM * 2:
        return None
    return DerivationNode(value, a.expr + ("!",), *budget)


def try_lg(a, config):
    budget = _unary(a, F_LG, config)
    if budget is None:
        return None
    if a.value.cached in (1, 4, 16):
        return None
    value = _checked(log10_value(a.value), config)
    if value is None:
        return None
    return DerivationNode(value, a.expr + ("lg",), *budget)


def try_lb(a, config):
    budget = _unary(a, F_LB, config)
    if budget is None:
        return None
    if a.value.cached in (1, 4, 16):
        return None
    value = _checked(log2_value(a.value), config)
    if value is None:
        return None
    return DerivationNode(value, a.expr + ("lb",), *budget)


# --- Binary transforms ---

def try_logab(a, b, config):
    depth = max(a.depth, b.depth) + 1
    if depth > config.max_nest:
        return None
    used = _merge_used(a, b, config)
    if used is None:
        return None
    if used[F_LOG] + 1 > config.max_use(F_LOG):
        return None
    used = used[:F_LOG] + (used[F_LOG] + 1,) + used[F_LOG + 1:]
    if b.value.cached == 1:
        return None
    value = _checked(log_value(a.value, b.value), config)
    if value is None:
        return None
    return DerivationNode(value, a.expr + b.expr + ("log",), used, depth)


def _arith(a, b, op, value, used):
    return DerivationNode(value, a.expr + b.expr + (op,), used, max(a.depth, b.depth))


def try_add(a, b, config):
    used = _merge_used(a, b, config)
    if used is None:
        return None
    value = _checked(a.value.add(b.value), config)
    if value is None:
        return None
    return _arith(a, b, "+", value, used)


def try_sub(a, b, config):
    used = _merge_used(a, b, config)
    if used is None:
        return None
    value = _checked(a.value.subtract(b.value), config)
    if value is None:
        return None
    return _arith(a, b, "-", value, used)


def try_mul(a, b, config):
    used = _merge_used(a, b, config)
    if used is None:
        return None
    value = a.value.multiply(b.value)
    if value is None:
        return None
    return _arith(a, b, "*", value, used)


def try_div(a, b, config):
    used = _merge_used(a, b, config)
    if used is None:
        return None
    if b.value.sign == 0 or b.value.cached == 1:
        return None
    value = a.value.divide(b.value)
    if value is None:
        return None
    if value.cached is None and value.exp_sum > MAX_EXP_SUM:
        return None
    return _arith(a, b, "/", value, used)


def _swapped(transform):
    def run(a, b, config):
        return transform(b, a, config)
    run.__name__ = f"{transform.__name__}_swapped"
    return run


UNARY_TRANSFORMS = (try_sqrt, try_fact, try_lg, try_lb)
BINARY_TRANSFORMS = (
    try_add,
    try_sub, _swapped(try_sub),
    try_mul,
    try_div, _swapped(try_div),
    try_logab, _swapped(try_logab),
)
ARITHMETIC_TRANSFORMS = BINARY_TRANSFORMS[:6]


# --- Postfix replay and statistics ---

_BINARY_RULES = {
    "+": lambda a, b: a.add(b),
    "-": lambda a, b: a.subtract(b),
    "*": lambda a, b: a.multiply(b),
    "/": lambda a, b: a.divide(b),
    "log": log_value,
}
_UNARY_RULES = {
    "sqrt": sqrt_value,
    "!": factorial_value,
    "lg": log10_value,
    "lb": log2_value,
}


def evaluate_postfix(tokens, no_negative=False):
    """
    Replay a postfix sequence with exact arithmetic.
    Returns the ExactValue, or None on malformed input, an inexact step,
    or a negative intermediate when no_negative is set.
    """
    stack = []
    for t in tokens:
        if t in _BINARY_RULES:
            if len(stack) < 2:
                return None
            b = stack.pop()
            a = stack.pop()
            value = _BINARY_RULES[t](a, b)
        elif t in _UNARY_RULES:
            if not stack:
                return None
            value = _UNARY_RULES[t](stack.pop())
        else:
            try:
                value = ExactValue.from_int(int(t))
            except ValueError:
                return None
        if value is None:
            return None
        if no_negative and value.sign < 0:
            return None
        stack.append(value)
    if len(stack) != 1:
        return None
    return stack[0]


def count_leaf_tokens(tokens):
    return sum(1 for t in tokens if not is_binary_token(t) and not is_unary_token(t))


def leaf_signature(tokens):
    """Sorted leaf tokens; equal signatures mean the same inputs were consumed."""
    return tuple(sorted(t for t in tokens if not is_binary_token(t) and not is_unary_token(t)))


def count_plus_tokens(tokens):
    return sum(1 for t in tokens if t == "+")


def usage_of(tokens):
    """Per-function usage counters of a postfix sequence."""
    used = [0] * F_CNT
    for t in tokens:
        if t in UNARY_TOKENS:
            used[UNARY_TOKENS[t]] += 1
        elif t == "log":
            used[F_LOG] += 1
    return tuple(used)


def nesting_depth(tokens):
    """Special-function nesting depth, counted the way the transforms count it."""
    stack = []
    for t in tokens:
        if is_unary_token(t):
            if not stack:
                return -1
            stack.append(stack.pop() + 1)
        elif is_binary_token(t):
            if len(stack) < 2:
                return -1
            b = stack.pop()
            a = stack.pop()
            stack.append(max(a, b) + (1 if t == "log" else 0))
        else:
            stack.append(0)
    return stack[0] if len(stack) == 1 else -1
