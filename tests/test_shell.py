import io
import random

import pytest

from config import configure
from shell import (
    RANDOM_PROMPT, SOLUTION_PROMPT, format_ratio, parse_mode_cmd, parse_trial_args,
    run, run_trials, solve_direct, solve_random,
)

ARITH = configure(24, 4, 0, 0, 0, 0, 0, 1, 1)


def test_parse_mode_cmd() -> None:
    assert parse_mode_cmd("random") is True
    assert parse_mode_cmd("solution") is False
    assert parse_mode_cmd("1 2 3 4") is None


@pytest.mark.parametrize("ok, total, expected", [
    (0, 5, "0/5=0"),
    (5, 5, "5/5=1"),
    (1, 3, "1/3=0.33"),
    (2, 3, "2/3=0.67"),
    (1, 2, "1/2=0.50"),
])
def test_format_ratio(ok, total, expected) -> None:
    assert format_ratio(ok, total) == expected


def test_parse_trial_args() -> None:
    assert parse_trial_args("10 4 1 13") == (10, 4, 1, 13)
    assert parse_trial_args("10 4 1 13 extra") == (10, 4, 1, 13)
    assert parse_trial_args("10 4 1") is None
    assert parse_trial_args("a b c d") is None
    assert parse_trial_args("0 4 1 13") is None
    assert parse_trial_args("1 4 9 3") is None


def test_run_trials() -> None:
    results = list(run_trials(3, 4, 1, 13, ARITH, rng=random.Random(7)))
    assert len(results) == 3
    for numbers, found, expr in results:
        assert len(numbers) == 4
        assert all(1 <= n <= 13 for n in numbers)
        assert found == (expr is not None)


def test_solve_direct() -> None:
    out = io.StringIO()
    solve_direct("1 1 1 1", ARITH, out)
    solve_direct("-1 2 3 4", ARITH, out)
    solve_direct("abc", ARITH, out)
    solve_direct("12 2", ARITH, out)
    assert out.getvalue().splitlines() == ["no solution", "??", "??", "12 * 2 = 24"]


def test_solve_random() -> None:
    out = io.StringIO()
    solve_random("bad", ARITH, out)
    assert out.getvalue() == "invalid input\n"

    out = io.StringIO()
    solve_random("2 1 24 24", ARITH, out)
    assert out.getvalue().splitlines() == [
        "24", ">>> 24 = 24",
        "24", ">>> 24 = 24",
        "Solvable ratio 2/2=1",
    ]


def test_run_switches_modes() -> None:
    stdin = io.StringIO("12 2\nrandom\n1 2 1 1\nsolution\n1 1 1 1\n\n")
    out = io.StringIO()
    run(ARITH, stdin, out, rng=random.Random(1))
    text = out.getvalue()
    assert text.startswith(SOLUTION_PROMPT + "12 * 2 = 24\n")
    assert RANDOM_PROMPT + "1 1\n>>> no solution\nSolvable ratio 0/1=0\n" in text
    assert text.endswith(SOLUTION_PROMPT + "no solution\n" + SOLUTION_PROMPT)


def test_run_stops_at_eof() -> None:
    out = io.StringIO()
    run(ARITH, io.StringIO(""), out)
    assert out.getvalue() == SOLUTION_PROMPT
