import re
from collections import Counter

from operations import evaluate_postfix


class ParseError(ValueError):
    pass


# --- Input lines ---
def parse_numbers_line(line: str) -> list[int]:
    """Whitespace/comma separated integers; malformed tokens are skipped."""
    numbers = []
    for part in re.split(r"[\s,]+", line.strip()):
        if not part:
            continue
        try:
            numbers.append(int(part))
        except ValueError:
            continue
    return numbers


# --- Guess normalization ---
def normalize_expression(expr: str) -> str:
    expr = expr.lower()
    replacements = {
        "+": "+", "−": "-", "-": "-", "x": "*", "×": "*", "*": "*",
        "÷": "/", "/": "/", "(": "(", "[": "(", "{": "(", ")": ")", "]": ")", "}": ")"
    }
    normalized = "".join(replacements.get(ch, ch) for ch in expr)
    normalized = re.sub(r"\s+", "", normalized)
    return normalized


# --- Infix reader ---
def tokenize(expr: str) -> list[tuple[str, str]]:
    tokens = []
    i = 0
    while i < len(expr):
        ch = expr[i]
        if ch.isspace():
            i += 1
            continue
        if ch in "(),!+*/":
            tokens.append(("symbol", ch))
            i += 1
            continue
        if ch == "-":
            prev = tokens[-1] if tokens else None
            unary = prev is None or (prev[0] == "symbol" and prev[1] in "(,+-*/")
            if unary and i + 1 < len(expr) and expr[i + 1].isdigit():
                j = i + 1
                while j < len(expr) and expr[j].isdigit():
                    j += 1
                tokens.append(("number", expr[i:j]))
                i = j
                continue
            tokens.append(("symbol", ch))
            i += 1
            continue
        if ch.isdigit():
            j = i + 1
            while j < len(expr) and expr[j].isdigit():
                j += 1
            tokens.append(("number", expr[i:j]))
            i = j
            continue
        if ch.isalpha():
            j = i + 1
            while j < len(expr) and expr[j].isalpha():
                j += 1
            tokens.append(("ident", expr[i:j].lower()))
            i = j
            continue
        raise ParseError(f"unexpected char: {ch}")
    return tokens


FUNCTIONS = {"sqrt": 1, "lg": 1, "lb": 1, "log": 2}


def parse_to_ast(tokens):
    """
    Recursive descent over the tokens. Nodes are tuples:
    ("number", text), ("binary", op, left, right), ("factorial", node),
    ("func", name, [args]).
    """
    idx = 0

    def peek():
        return tokens[idx] if idx < len(tokens) else None

    def match(value):
        nonlocal idx
        tok = peek()
        if tok is not None and tok[0] == "symbol" and tok[1] == value:
            idx += 1
            return True
        return False

    def expect(value):
        if not match(value):
            raise ParseError(f"expected {value}")

    def parse_expression():
        node = parse_term()
        while peek() is not None and peek()[0] == "symbol" and peek()[1] in "+-":
            op = peek()[1]
            advance()
            node = ("binary", op, node, parse_term())
        return node

    def parse_term():
        node = parse_factor()
        while peek() is not None and peek()[0] == "symbol" and peek()[1] in "*/":
            op = peek()[1]
            advance()
            node = ("binary", op, node, parse_factor())
        return node

    def parse_factor():
        node = parse_primary()
        while match("!"):
            node = ("factorial", node)
        return node

    def advance():
        nonlocal idx
        idx += 1

    def parse_primary():
        tok = peek()
        if tok is None:
            raise ParseError("unexpected end")
        kind, value = tok
        if kind == "number":
            advance()
            return ("number", value)
        if kind == "ident":
            advance()
            if value not in FUNCTIONS:
                raise ParseError(f"unknown function: {value}")
            expect("(")
            args = []
            if not match(")"):
                args.append(parse_expression())
                while match(","):
                    args.append(parse_expression())
                expect(")")
            if len(args) != FUNCTIONS[value]:
                raise ParseError(f"{value} takes {FUNCTIONS[value]} argument(s)")
            return ("func", value, args)
        if match("("):
            node = parse_expression()
            expect(")")
            return node
        raise ParseError(f"unexpected token: {value}")

    ast = parse_expression()
    if idx < len(tokens):
        raise ParseError("extra tokens")
    return ast


def ast_to_postfix(node) -> list[str]:
    kind = node[0]
    if kind == "number":
        return [node[1]]
    if kind == "binary":
        return ast_to_postfix(node[2]) + ast_to_postfix(node[3]) + [node[1]]
    if kind == "factorial":
        return ast_to_postfix(node[1]) + ["!"]
    _, name, args = node
    out = []
    for arg in args:
        out += ast_to_postfix(arg)
    return out + [name]


def infix_to_postfix(expr: str) -> list[str]:
    return ast_to_postfix(parse_to_ast(tokenize(expr)))


# --- LaTeX ---
def _prec(node):
    if node[0] == "binary":
        return 1 if node[1] in "+-" else 2
    if node[0] in ("factorial", "func"):
        return 3
    return 4


def to_latex(node) -> str:
    def wrap_if(child, min_prec):
        latex = to_latex(child)
        return f"\\left({latex}\\right)" if _prec(child) < min_prec else latex

    kind = node[0]
    if kind == "number":
        return node[1]
    if kind == "binary":
        _, op, left, right = node
        if op == "/":
            return f"\\frac{{{to_latex(left)}}}{{{to_latex(right)}}}"
        if op == "*":
            return f"{wrap_if(left, 2)} \\cdot {wrap_if(right, 2)}"
        return f"{wrap_if(left, 1)} {op} {wrap_if(right, 1)}"
    if kind == "factorial":
        child = node[1]
        latex = to_latex(child)
        if child[0] == "factorial" or _prec(child) < 3:
            latex = f"\\left({latex}\\right)"
        return f"{latex}!"
    _, name, args = node
    if name == "log":
        return f"\\log_{{{to_latex(args[0])}}}\\left({to_latex(args[1])}\\right)"
    arg = to_latex(args[0])
    if name == "sqrt":
        return f"\\sqrt{{{arg}}}"
    if name == "lg":
        return f"\\lg\\left({arg}\\right)"
    return f"\\mathrm{{lb}}\\left({arg}\\right)"


def infix_to_latex(expr: str) -> str:
    try:
        return to_latex(parse_to_ast(tokenize(expr)))
    except ParseError:
        safe = expr.replace("\\", "\\\\").replace("{", "\\{").replace("}", "\\}")
        return f"\\text{{{safe}}}"


# --- Solver output scraping ---
def strip_prompt(expr: str) -> str:
    cleaned = expr.strip()
    if cleaned.startswith(">>>"):
        cleaned = cleaned[3:].strip()
    cut = max(cleaned.rfind("："), cleaned.rfind(":"))
    if cut != -1:
        cleaned = cleaned[cut + 1:].strip()
    m = re.search(r"(sqrt|lg|lb|log|[0-9(\-])", cleaned)
    if m and m.start() > 0:
        cleaned = cleaned[m.start():].strip()
    return cleaned


def extract_solutions(output: str, target: int = 24, limit: int = 0) -> list[dict]:
    """Unique "<infix> = <target>" expressions from solver text, with LaTeX."""
    solutions = []
    seen = set()
    marker = f" = {target}"
    for line in output.splitlines():
        idx = line.rfind(marker)
        if idx <= 0:
            continue
        expr = strip_prompt(line[:idx])
        if not expr or expr in seen:
            continue
        seen.add(expr)
        solutions.append({"infix": expr, "latex": infix_to_latex(expr)})
        if limit and len(solutions) >= limit:
            break
    return solutions


# --- Guess validation ---
def parse_numbers_solution(guess: str, available_numbers: list[int], no_negative: bool = True) -> tuple[int, str] | bool:
    """
    Validate and evaluate a 24-game guess exactly.

    Every available number must be used exactly once. Intermediate results
    must be exact integers (and non-negative when no_negative is set).

    Returns (final_result, normalized_expression) on success, or False on failure.
    """
    normalized_guess = normalize_expression(guess.strip())
    try:
        postfix = infix_to_postfix(normalized_guess)
    except ParseError:
        return False

    literals = [t for t in postfix if re.fullmatch(r"-?\d+", t)]
    if Counter(int(t) for t in literals) != Counter(available_numbers):
        return False

    value = evaluate_postfix(postfix, no_negative=no_negative)
    if value is None or value.cached is None:
        return False
    return value.cached, normalized_guess
