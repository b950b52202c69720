"""
Text-in/text-out entry points for hosting the solver inside another
application (the discord bot, a web worker, ...).

    config = configure(24, 4, 2, 2, 1, 2, 1, 1, 0)
    text = solve_text("3 3 8 8", limit=10, config=config)
"""

from config import DEFAULT_CONFIG, configure  # noqa: F401
from infix import format_answer
from numbers_solver import solve_all
from parser import extract_solutions, parse_numbers_line


def solve_lines(line, limit=0, config=None):
    """Best answers for one input line as "<infix> = <target>" strings."""
    config = config or DEFAULT_CONFIG
    if not line or not line.strip():
        return []
    numbers = parse_numbers_line(line)
    if not numbers:
        return []
    found, exprs = solve_all(numbers, config)
    if not found:
        return []
    lines = [format_answer(expr, config.target) for expr in exprs]
    if limit > 0:
        lines = lines[:limit]
    return lines


def solve_text(line, limit=0, config=None):
    """solve_lines joined with newlines (one trailing newline per line)."""
    return "".join(f"{text}\n" for text in solve_lines(line, limit, config))


def solve_latex(line, limit=0, config=None):
    """Best answers as [{"infix", "latex"}], read back from solve_text output."""
    config = config or DEFAULT_CONFIG
    return extract_solutions(solve_text(line, 0, config), config.target, limit)
