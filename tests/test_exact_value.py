from config import MAX_ABS_VAL
from exact_value import (
    ExactValue, factorial_factors, factorize_small, factors_add, factors_subtract, primes_up_to,
)


def test_from_int_factorizes() -> None:
    v = ExactValue.from_int(24)
    assert v.sign == 1
    assert v.cached == 24
    assert v.factors == ((2, 3), (3, 1))


def test_from_int_bounds() -> None:
    assert ExactValue.from_int(MAX_ABS_VAL).cached == MAX_ABS_VAL
    assert ExactValue.from_int(MAX_ABS_VAL + 1) is None
    assert ExactValue.from_int(-5, no_negative=True) is None
    assert ExactValue.from_int(-5).sign == -1


def test_zero_and_one_have_no_factors() -> None:
    assert ExactValue.from_int(0).factors == ()
    assert ExactValue.from_int(0).sign == 0
    assert ExactValue.from_int(1).factors == ()


def test_factorize_small_large_prime() -> None:
    assert factorize_small(97) == ((97, 1),)
    assert factorize_small(2 * 2 * 3 * 101) == ((2, 2), (3, 1), (101, 1))


def test_primes_and_legendre() -> None:
    assert primes_up_to(20) == (2, 3, 5, 7, 11, 13, 17, 19)
    # 10! = 3628800
    assert factorial_factors(10) == ((2, 8), (3, 4), (5, 2), (7, 1))


def test_factor_vector_helpers() -> None:
    assert factors_add(((2, 1),), ((2, 2), (3, 1))) == ((2, 3), (3, 1))
    assert factors_subtract(((2, 3), (3, 1)), ((2, 1),)) == ((2, 2), (3, 1))
    assert factors_subtract(((2, 3),), ((3, 1),)) is None
    assert factors_subtract(((2, 1),), ((2, 2),)) is None


def test_from_factors_drops_cache_above_bound() -> None:
    big = ExactValue.from_factors(1, factorial_factors(30))
    assert big.cached is None
    assert not big.has_int
    small = ExactValue.from_factors(1, factorial_factors(5))
    assert small.cached == 120


def test_large_values_divide_back_down() -> None:
    f30 = ExactValue.from_factors(1, factorial_factors(30))
    f29 = ExactValue.from_factors(1, factorial_factors(29))
    assert f30.divide(f29) == ExactValue.from_int(30)
    assert f29.divide(f30) is None


def test_add_subtract_need_cache() -> None:
    big = ExactValue.from_factors(1, factorial_factors(30))
    assert big.add(ExactValue.from_int(1)) is None
    assert ExactValue.from_int(MAX_ABS_VAL).add(ExactValue.from_int(1)) is None
    assert ExactValue.from_int(3).subtract(ExactValue.from_int(5)) == ExactValue.from_int(-2)


def test_multiply() -> None:
    big = ExactValue.from_factors(1, factorial_factors(30))
    assert big.multiply(ExactValue.zero()) == ExactValue.zero()
    assert ExactValue.from_int(6).multiply(ExactValue.from_int(-4)) == ExactValue.from_int(-24)


def test_multiply_exponent_ceiling() -> None:
    a = ExactValue.from_int(2 ** 40)
    assert a.multiply(a, max_exp_sum=79) is None
    product = a.multiply(a)
    assert product.cached is None
    assert product.factors == ((2, 80),)


def test_divide_exactness() -> None:
    assert ExactValue.from_int(7).divide(ExactValue.from_int(2)) is None
    assert ExactValue.from_int(12).divide(ExactValue.from_int(4)) == ExactValue.from_int(3)
    assert ExactValue.from_int(-8).divide(ExactValue.from_int(4)) == ExactValue.from_int(-2)
    assert ExactValue.from_int(5).divide(ExactValue.zero()) is None
    assert ExactValue.zero().divide(ExactValue.from_int(5)) == ExactValue.zero()


def test_equality_across_constructors() -> None:
    assert ExactValue.from_int(24) == ExactValue.from_factors(1, ((2, 3), (3, 1)))
    assert ExactValue.from_int(24) != ExactValue.from_int(-24)
    assert hash(ExactValue.from_int(24)) == hash(ExactValue.from_factors(1, ((2, 3), (3, 1))))


def test_keys() -> None:
    assert ExactValue.zero().key() == "0"
    assert ExactValue.from_int(24).key() == ExactValue.from_factors(1, ((2, 3), (3, 1))).key()
    big = ExactValue.from_factors(1, factorial_factors(30))
    assert big.key().startswith("+2^26,")
