#!/usr/bin/env python3
"""
Interactive loop around the solver.

Solution mode: type numbers, get every distinct way to make the target.
Random mode:   type "T N L R" to run T trials of N random numbers in [L, R]
               and report how often a solution exists.

"random" / "solution" switch modes; an empty line or EOF quits.
"""

import random
import sys
from fractions import Fraction

from config import load_search_config
from infix import format_answer
from numbers_solver import solve_all, solve_first
from parser import parse_numbers_line

SOLUTION_PROMPT = "Enter numbers (type random for random mode): "
RANDOM_PROMPT = "Enter trials, count, min, max (type solution to go back): "


def parse_mode_cmd(line):
    """True/False for a mode switch to random/solution, None otherwise."""
    if line == "random":
        return True
    if line == "solution":
        return False
    return None


def format_ratio(ok, total):
    """ok/total=0, ok/total=1, or two decimals for anything in between."""
    ratio = Fraction(ok, total)
    if ratio == 0:
        shown = "0"
    elif ratio == 1:
        shown = "1"
    else:
        shown = f"{float(ratio):.2f}"
    return f"{ok}/{total}={shown}"


def parse_trial_args(line):
    """(trials, count, low, high) or None when malformed."""
    parts = line.split()
    if len(parts) < 4:
        return None
    try:
        trials, count, low, high = (int(p) for p in parts[:4])
    except ValueError:
        return None
    if trials <= 0 or count <= 0 or low > high:
        return None
    return trials, count, low, high


def run_trials(trials, count, low, high, config, rng=None):
    """Yield (numbers, found, postfix) for each random trial."""
    rng = rng or random.Random()
    for _ in range(trials):
        numbers = [rng.randint(low, high) for _ in range(count)]
        found, expr = solve_first(numbers, config)
        yield numbers, found, expr


def solve_direct(line, config, out):
    numbers = parse_numbers_line(line)
    if not numbers or (config.no_negative and any(n < 0 for n in numbers)):
        print("??", file=out)
        return
    found, exprs = solve_all(numbers, config)
    if not found:
        print("no solution", file=out)
        return
    for expr in exprs:
        print(format_answer(expr, config.target), file=out)


def solve_random(line, config, out, rng=None):
    args = parse_trial_args(line)
    if args is None:
        print("invalid input", file=out)
        return
    trials = args[0]
    ok = 0
    for numbers, found, expr in run_trials(*args, config=config, rng=rng):
        print(" ".join(str(n) for n in numbers), file=out)
        if found:
            ok += 1
            print(f">>> {format_answer(expr, config.target)}", file=out)
        else:
            print(">>> no solution", file=out)
    print(f"Solvable ratio {format_ratio(ok, trials)}", file=out)


def run(config=None, stdin=None, out=None, rng=None):
    config = config or load_search_config()
    stdin = stdin or sys.stdin
    out = out or sys.stdout
    random_mode = False
    while True:
        out.write(RANDOM_PROMPT if random_mode else SOLUTION_PROMPT)
        out.flush()
        line = stdin.readline()
        if not line:
            break
        line = line.strip()
        if not line:
            break

        switch = parse_mode_cmd(line)
        if switch is not None:
            random_mode = switch
            continue

        if random_mode:
            solve_random(line, config, out, rng)
        else:
            solve_direct(line, config, out)


def main():
    try:
        run()
    except KeyboardInterrupt:
        print()


if __name__ == "__main__":
    main()
