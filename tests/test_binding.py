from binding import configure, solve_latex, solve_lines, solve_text
from config import DEFAULT_CONFIG
from parser import parse_numbers_solution

ARITH = configure(24, 4, 0, 0, 0, 0, 0, 1, 1)


def test_configure_builds_default() -> None:
    assert configure(24, 4, 2, 2, 1, 2, 1, 1, 0) == DEFAULT_CONFIG
    cfg = configure(10, 2, 0, 1, 0, 0, 0, 0, 1)
    assert cfg.target == 10
    assert cfg.max_nest == 2
    assert cfg.max_uses == (0, 1, 0, 0, 0)
    assert not cfg.no_negative
    assert cfg.only_arithmetic


def test_empty_or_unreadable_lines() -> None:
    assert solve_lines("") == []
    assert solve_lines("   ") == []
    assert solve_lines("a b c", config=ARITH) == []
    assert solve_text("", config=ARITH) == ""


def test_unsolvable() -> None:
    assert solve_lines("1 1 1 1", config=ARITH) == []


def test_solve_lines() -> None:
    lines = solve_lines("1 2 3 4", config=ARITH)
    assert lines
    for line in lines:
        infix, target = line.rsplit(" = ", 1)
        assert target == "24"
        assert parse_numbers_solution(infix, [1, 2, 3, 4])[0] == 24


def test_limit() -> None:
    assert len(solve_lines("1 2 3 4", limit=1, config=ARITH)) == 1
    assert solve_lines("1 2 3 4", limit=0, config=ARITH) == solve_lines("1 2 3 4", config=ARITH)


def test_solve_text() -> None:
    text = solve_text("10 10 4 4", config=ARITH)
    assert text.endswith("\n")
    assert text.splitlines() == solve_lines("10 10 4 4", config=ARITH)
    assert "(10 * 10 - 4) / 4 = 24" in text.splitlines()


def test_solve_latex() -> None:
    solutions = solve_latex("10 10 4 4", config=ARITH)
    assert [s["infix"] + " = 24" for s in solutions] == solve_lines("10 10 4 4", config=ARITH)
    assert {"infix": "(10 * 10 - 4) / 4", "latex": r"\frac{10 \cdot 10 - 4}{4}"} in solutions
    assert len(solve_latex("1 2 3 4", limit=1, config=ARITH)) == 1
    assert solve_latex("1 1 1 1", config=ARITH) == []
