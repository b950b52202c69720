#!/usr/bin/env python3
"""
24 Points Solver
----------------
Finds expressions that use every input number exactly once to reach a target
(24 by default) with + - * /, sqrt, factorial, lg (log10), lb (log2) and
log_a(b).

Provides callable functions:
    solve_first(numbers, config)  -> (found, postfix)
    solve_all(numbers, config)    -> (found, [postfix, ...])   best per class
    solve_numbers(target, numbers) -> {"target", "found", "results"}

Usage (example):
    from numbers_solver import solve_numbers
    result = solve_numbers(24, [10, 10, 4, 4])
"""

from dataclasses import replace

from config import DEFAULT_CONFIG, MEMO_IN_FIND_ALL
from equivalence import Canonicalizer
from exact_value import ExactValue
from infix import render_infix
from operations import (
    ARITHMETIC_TRANSFORMS, BINARY_TRANSFORMS, UNARY_TRANSFORMS, DerivationNode,
    count_leaf_tokens, count_plus_tokens, leaf_signature,
)


class Solver:
    """
    One solve invocation: memo set, answer map and equivalence cache all
    live here, so separate solves never share state.
    """

    def __init__(self, config=DEFAULT_CONFIG, on_answer=None):
        self.config = config
        self.on_answer = on_answer
        self.target = ExactValue.from_int(config.target)
        self.canon = Canonicalizer(simplify=config.filter_equivalents)
        self.find_first = False
        self.found = False
        self.first_expr = None
        self.expected_leaf_count = 0
        self.memo = set()
        self.best_exprs = {}
        self.best_plus = {}

    def _reset(self, size, find_first):
        self.find_first = find_first
        self.found = False
        self.first_expr = None
        self.expected_leaf_count = size
        self.memo.clear()
        self.best_exprs.clear()
        self.best_plus.clear()

    def leaves(self, numbers):
        """Input nodes, or None if any number can't be a leaf."""
        nodes = []
        for n in numbers:
            node = DerivationNode.leaf(n, self.config)
            if node is None:
                return None
            nodes.append(node)
        return tuple(nodes)

    @staticmethod
    def state_key(nodes):
        return ";".join(sorted(nd.key() for nd in nodes))

    @property
    def _stop(self):
        return self.found and self.find_first

    def add_answer(self, expr):
        key = self.canon.answer_key(expr)
        if not key:
            return
        plus_cnt = count_plus_tokens(expr)
        if key not in self.best_plus or plus_cnt > self.best_plus[key]:
            self.best_plus[key] = plus_cnt
            self.best_exprs[key] = expr
            if self.on_answer is not None:
                self.on_answer(expr)

    def _filter_equivalents(self, nodes):
        """
        Collapse nodes sharing an answer key and the same leaves onto the one
        with most '+'. Folded keys alone would merge e.g. 3+1 with 2*2.
        """
        best = {}
        counts = {}
        filtered = []
        for nd in nodes:
            answer_key = self.canon.answer_key(nd.expr)
            if not answer_key:
                filtered.append(nd)
                continue
            key = (answer_key, leaf_signature(nd.expr))
            counts[key] = counts.get(key, 0) + 1
            plus_cnt = count_plus_tokens(nd.expr)
            if key not in best or plus_cnt > best[key][0]:
                best[key] = (plus_cnt, nd)
        for key, (_, nd) in best.items():
            filtered.extend([nd] * counts[key])
        return tuple(filtered)

    def _hit(self, node):
        if self.target is None or node.value != self.target:
            return False
        # Every step consumes two nodes and produces one.
        assert count_leaf_tokens(node.expr) == self.expected_leaf_count
        return True

    def search(self, nodes):
        if self._stop:
            return

        if self.config.filter_equivalents and len(nodes) > 1:
            nodes = self._filter_equivalents(nodes)

        if len(nodes) == 1:
            node = nodes[0]
            if self._hit(node):
                self.found = True
                if self.find_first:
                    self.first_expr = node.expr
                else:
                    self.add_answer(node.expr)
            return

        if self.find_first or MEMO_IN_FIND_ALL:
            key = self.state_key(nodes)
            if key in self.memo:
                return
            self.memo.add(key)

        config = self.config
        if not config.only_arithmetic:
            for i, node in enumerate(nodes):
                for transform in UNARY_TRANSFORMS:
                    out = transform(node, config)
                    if out is None:
                        continue
                    self.search(nodes[:i] + (out,) + nodes[i + 1:])
                    if self._stop:
                        return

        transforms = ARITHMETIC_TRANSFORMS if config.only_arithmetic else BINARY_TRANSFORMS
        n = len(nodes)
        keys = [nd.key() for nd in nodes]
        pair_seen = set()
        for i in range(n - 1):
            for j in range(i + 1, n):
                pair = (keys[i], keys[j])
                if pair in pair_seen:
                    continue
                pair_seen.add(pair)
                a, b = nodes[i], nodes[j]
                rest = nodes[:i] + nodes[i + 1:j] + nodes[j + 1:]
                for transform in transforms:
                    out = transform(a, b, config)
                    if out is None:
                        continue
                    self.search(rest + (out,))
                    if self._stop:
                        return

    def solve_first(self, numbers):
        self._reset(len(numbers), find_first=True)
        nodes = self.leaves(numbers)
        if not nodes:
            return False, None
        self.search(nodes)
        return self.found, self.first_expr

    def solve_all(self, numbers, find_first_only=False):
        self._reset(len(numbers), find_first=find_first_only)
        nodes = self.leaves(numbers)
        if not nodes:
            return False, []
        self.search(nodes)
        if find_first_only and self.found:
            self.add_answer(self.first_expr)
        return self.found, list(self.best_exprs.values())


def solve_first(numbers, config=DEFAULT_CONFIG):
    """Stop at the first expression that reaches the target."""
    return Solver(config).solve_first(list(numbers))


def solve_all(numbers, config=DEFAULT_CONFIG, find_first_only=False, on_answer=None):
    """Best expression (most '+' tokens, first seen on ties) per equivalence class."""
    return Solver(config, on_answer).solve_all(list(numbers), find_first_only)


def solve_numbers(target, numbers, config=None, find_first_only=False):
    """
    Solve a 24-style puzzle for an explicit target.
    Returns dict: { target, found, results: [(postfix, infix), ...] }
    """
    config = replace(config or DEFAULT_CONFIG, target=target)
    found, exprs = solve_all(numbers, config, find_first_only)
    return {
        "target": target,
        "found": found,
        "results": [(expr, render_infix(expr)) for expr in exprs],
    }


# Optional: run standalone for testing
if __name__ == "__main__":
    numbers = [10, 10, 4, 4]
    result = solve_numbers(24, numbers)
    if not result["found"]:
        print(f"No way to make {result['target']} from {numbers}")
    for _, infix in result["results"]:
        print(f"{infix} = {result['target']}")
