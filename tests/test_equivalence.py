from equivalence import Canonicalizer, build_expr_tree, canonical_key


def key(text):
    return canonical_key(tuple(text.split()))


def test_leaves_and_functions() -> None:
    assert key("7") == "7"
    assert key("9 sqrt") == "sqrt(9)"
    assert key("4 !") == "!(4)"
    assert key("2 8 log") == "log(2,8)"
    assert key("2 8 log") != key("8 2 log")


def test_addition_is_commutative() -> None:
    assert key("1 2 +") == key("2 1 +")
    assert key("1 2 +") == "A:+1|+2"


def test_addition_is_associative() -> None:
    flat = key("1 2 + 3 +")
    assert flat == key("1 2 3 + +")
    assert flat == key("3 2 1 + +")
    assert flat == "A:+1|+2|+3"


def test_subtraction_sign_normalization() -> None:
    assert key("3 5 -") == "A:+3|-5"
    assert key("5 3 -") == "-" + key("3 5 -")
    assert key("1 2 3 - -") == key("1 3 + 2 -")


def test_multiplication_chains() -> None:
    assert key("2 3 *") == key("3 2 *") == "M:*2|*3"
    assert key("2 3 * 4 *") == key("4 3 2 * *")
    assert key("8 2 /") == "M:*8|/2"
    assert key("8 2 4 / /") == key("8 4 * 2 /")


def test_neutral_elements_dropped() -> None:
    assert key("4 1 *") == "4"
    assert key("1 4 *") == "4"
    assert key("4 1 /") == "4"
    assert key("4 0 +") == "4"
    assert key("1 1 *") == "1"
    assert key("0 0 +") == "0"


def test_nested_chains() -> None:
    assert key("1 2 + 3 *") == key("3 2 1 + *")
    assert key("1 2 + 3 + 4 *") == "M:*4|*A:+1|+2|+3"
    assert key("10 10 * 4 - 4 /") == key("10 10 * 4 - 4 /")
    assert key("10 10 * 4 - 4 /") != key("10 10 * 4 4 / -")


def test_malformed_expression() -> None:
    assert build_expr_tree(("+",)) is None
    assert build_expr_tree(("1", "2")) is None
    assert canonical_key(("1", "+")) == ""


def test_answer_key_includes_leaf_count() -> None:
    canon = Canonicalizer()
    assert canon.answer_key(("4", "1", "*")) == "4#C2"
    assert canon.answer_key(("4",)) == "4#C1"
    assert canon.answer_key(("+",)) == ""


def test_constant_folding() -> None:
    canon = Canonicalizer(simplify=True)
    assert canon.key(("1", "2", "+", "3", "*")) == "9"
    assert canon.key(("4", "!")) == "24"
    assert canon.key(("9", "sqrt", "2", "8", "log", "*")) == "9"
    # 7/2 does not fold, so its key stays structural
    assert canon.key(("7", "2", "/")) == "M:*7|/2"


def test_key_cache_is_bounded() -> None:
    canon = Canonicalizer(max_cache=2)
    for text in ("1 2 +", "1 3 +", "1 4 +", "1 5 +", "1 6 +"):
        canon.key(tuple(text.split()))
        assert len(canon.cache) <= 3
    assert canon.key(("1", "6", "+")) == "A:+1|+6"
