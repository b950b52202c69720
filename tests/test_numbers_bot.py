import random

import config
from numbers_bot import find_solvable_selection
from numbers_solver import solve_first

ARITH = config.configure(24, 4, 0, 0, 0, 0, 0, 1, 1)


def test_finds_a_solvable_selection() -> None:
    picked = find_solvable_selection(ARITH, attempts=50, rng=random.Random(3))
    assert picked is not None
    selection, expr = picked
    assert len(selection) == 4
    assert all(1 <= n <= 13 for n in selection)
    assert solve_first(selection, ARITH) == (True, expr)


def test_gives_up_on_unreachable_target() -> None:
    # 13 ** 4 = 28561, so four numbers up to 13 never reach this
    unreachable = config.configure(100000, 4, 0, 0, 0, 0, 0, 1, 1)
    assert find_solvable_selection(unreachable, attempts=5, rng=random.Random(3)) is None


def test_attempts_default_to_config(monkeypatch) -> None:
    unreachable = config.configure(100000, 4, 0, 0, 0, 0, 0, 1, 1)
    calls = []

    class CountingRandom(random.Random):
        def randint(self, a, b):
            calls.append((a, b))
            return super().randint(a, b)

    monkeypatch.setattr(config, "ROUND_ATTEMPTS", 3)
    assert find_solvable_selection(unreachable, rng=CountingRandom(0)) is None
    assert len(calls) == 12
