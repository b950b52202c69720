"""
Expression equivalence
----------------------
Canonical keys for postfix expressions under associativity and
commutativity of + - * /. Two answers are the same answer when their keys
and leaf counts match.

    key("1 2 + 3 +") == key("3 2 1 + +") == "A:+1|+2|+3"
    key("3 5 -")     == "A:+3|-5"
    key("5 3 -")     == "-A:+3|-5"
"""

from math import isqrt

from config import MAX_EQUIV_KEY_CACHE, MAX_FACT_ARG, SIMPLIFY_STEPS
from operations import count_leaf_tokens, is_binary_token, is_unary_token

LL_MIN = -(1 << 63)
LL_MAX = (1 << 63) - 1


class ExprNode:
    __slots__ = ("op", "tok", "left", "right", "child")

    def __init__(self, op=None, tok=None, left=None, right=None, child=None):
        self.op = op
        self.tok = tok
        self.left = left
        self.right = right
        self.child = child

    @property
    def is_leaf(self):
        return self.op is None

    @property
    def is_unary(self):
        return self.child is not None

    @property
    def is_binary(self):
        return self.left is not None


def build_expr_tree(expr):
    """Tree for a postfix sequence, or None if it is malformed."""
    st = []
    for t in expr:
        if is_binary_token(t):
            if len(st) < 2:
                return None
            b = st.pop()
            a = st.pop()
            st.append(ExprNode(op=t, left=a, right=b))
        elif is_unary_token(t):
            if not st:
                return None
            st.append(ExprNode(op=t, child=st.pop()))
        else:
            st.append(ExprNode(tok=t))
    if len(st) != 1:
        return None
    return st[0]


# --- Constant folding over 64-bit integers ---

def _in_range(v):
    return LL_MIN <= v <= LL_MAX


def _fold_unary(op, v):
    if op == "sqrt":
        if v < 0:
            return None
        r = isqrt(v)
        return r if r * r == v else None
    if op == "!":
        if v < 0 or v > MAX_FACT_ARG:
            return None
        r = 1
        for i in range(2, v + 1):
            r *= i
            if r > LL_MAX:
                return None
        return r
    if v <= 0:
        return None
    if op == "lb":
        return v.bit_length() - 1 if v & (v - 1) == 0 else None
    k = 0
    while v % 10 == 0:
        v //= 10
        k += 1
    return k if v == 1 else None


def _fold_log(a, b):
    if a < 2 or b <= 0:
        return None
    k, cur = 0, 1
    while cur < b:
        cur *= a
        k += 1
        if cur > LL_MAX:
            return None
    return k if cur == b else None


def _fold_binary(op, a, b):
    if op == "+":
        r = a + b
    elif op == "-":
        r = a - b
    elif op == "*":
        r = a * b
    elif op == "/":
        if b == 0 or a % b:
            return None
        r = a // b
    else:
        return _fold_log(a, b)
    return r if _in_range(r) else None


class _Folder:
    """Per-tree memo of folded (value, steps); one instance per tree."""

    def __init__(self, steps=SIMPLIFY_STEPS):
        self.steps = steps
        self.memo = {}

    def fold(self, node):
        if self.steps <= 0:
            return None
        nid = id(node)
        if nid in self.memo:
            return self.memo[nid]
        self.memo[nid] = None
        result = None
        if node.is_leaf:
            try:
                result = (int(node.tok), 0)
            except ValueError:
                result = None
        elif node.is_unary:
            inner = self.fold(node.child)
            if inner is not None and inner[1] + 1 <= self.steps:
                v = _fold_unary(node.op, inner[0])
                if v is not None:
                    result = (v, inner[1] + 1)
        else:
            left = self.fold(node.left)
            right = self.fold(node.right)
            if left is not None and right is not None:
                steps = left[1] + right[1] + 1
                if steps <= self.steps:
                    v = _fold_binary(node.op, left[0], right[0])
                    if v is not None:
                        result = (v, steps)
        self.memo[nid] = result
        return result


class Canonicalizer:
    """
    Computes canonical keys. Holds its own key cache (RPN text -> key), so
    each solve gets an isolated instance.

    ``simplify`` turns on constant folding: a subtree that evaluates to an
    integer within the step budget is keyed by that integer.
    """

    def __init__(self, simplify=False, max_cache=MAX_EQUIV_KEY_CACHE):
        self.simplify = simplify
        self.max_cache = max_cache
        self.cache = {}
        self._folder = None

    def key(self, expr):
        """Canonical key of a postfix sequence; "" when malformed."""
        rpn_key = " ".join(expr)
        cached = self.cache.get(rpn_key)
        if cached is not None:
            return cached
        root = build_expr_tree(expr)
        if root is None:
            return ""
        self._folder = _Folder() if self.simplify else None
        key = self._node_key(root)
        self._folder = None
        if len(self.cache) > self.max_cache:
            self.cache.clear()
        self.cache[rpn_key] = key
        return key

    def answer_key(self, expr):
        key = self.key(expr)
        if not key:
            return ""
        return f"{key}#C{count_leaf_tokens(expr)}"

    def _node_key(self, node):
        if self._folder is not None:
            folded = self._folder.fold(node)
            if folded is not None:
                return str(folded[0])
        if node.is_leaf:
            return node.tok
        if node.is_unary:
            return f"{node.op}({self._node_key(node.child)})"
        if node.op in ("+", "-"):
            key, direct = self._add_key(node)
            if direct:
                return key
            if key.startswith("-"):
                return "-A:" + key[1:]
            return "A:" + key
        if node.op in ("*", "/"):
            key, direct = self._mul_key(node)
            if direct:
                return key
            return "M:" + key
        return f"{node.op}({self._node_key(node.left)},{self._node_key(node.right)})"

    def _collect(self, node, sign, ops, out):
        if node.is_binary and node.op in ops:
            self._collect(node.left, sign, ops, out)
            self._collect(node.right, sign if node.op == ops[0] else -sign, ops, out)
            return
        out.append((sign, self._node_key(node)))

    def _add_key(self, node):
        terms = []
        self._collect(node, 1, ("+", "-"), terms)
        terms = [("+" if s > 0 else "-") + k for s, k in terms if k != "0"]
        if not terms:
            return "0", True

        a = sorted(terms)
        b = sorted(("-" if t[0] == "+" else "+") + t[1:] for t in terms)
        sa, sb = "|".join(a), "|".join(b)
        neg = sb < sa
        use = b if neg else a

        if len(use) == 1:
            t = use[0]
            if t[0] == "+":
                return ("-" + t[1:]) if neg else t[1:], True
            return t[1:] if neg else t, True
        out = "|".join(use)
        return ("-" + out) if neg else out, False

    def _mul_key(self, node):
        factors = []
        self._collect(node, 1, ("*", "/"), factors)
        factors = [("*" if s > 0 else "/") + k for s, k in factors if k != "1"]
        if not factors:
            return "1", True
        if len(factors) == 1 and factors[0][0] == "*":
            return factors[0][1:], True
        return "|".join(sorted(factors)), False


def canonical_key(expr, simplify=False):
    return Canonicalizer(simplify=simplify).key(expr)
