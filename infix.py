"""
Postfix -> infix rendering with the fewest parentheses that keep the
reading unambiguous under the usual left-to-right rules.
"""

ATOM, FUNC, MUL, ADD = 4, 3, 2, 1
FUNCTION_TOKENS = ("sqrt", "lg", "lb")


class Segment:
    __slots__ = ("text", "prec", "bop")

    def __init__(self, text, prec, bop=None):
        self.text = text
        self.prec = prec
        self.bop = bop


def prec_of_binop(op):
    if op in ("+", "-"):
        return ADD
    if op in ("*", "/"):
        return MUL
    return 0


def need_paren_left(op, a):
    return a.prec < prec_of_binop(op)


def need_paren_right(op, b):
    p = prec_of_binop(op)
    if op == "+":
        # a + (b - c)
        return b.prec < p or (b.prec == p and b.bop == "-")
    if op == "*":
        # a * (b / c)
        return b.prec < p or (b.prec == p and b.bop == "/")
    # a - (b + c), a / (b * c)
    return b.prec <= p


def _wrap(text, paren):
    return f"({text})" if paren else text


def render_infix(tokens):
    """
    Render a postfix token sequence as infix. Malformed input (stack
    underflow or leftovers) comes back as the raw tokens joined by spaces.
    """
    raw = " ".join(tokens)
    st = []
    for t in tokens:
        if t in ("+", "-", "*", "/"):
            if len(st) < 2:
                return raw
            b = st.pop()
            a = st.pop()
            left = _wrap(a.text, need_paren_left(t, a))
            right = _wrap(b.text, need_paren_right(t, b))
            st.append(Segment(f"{left} {t} {right}", prec_of_binop(t), t))
        elif t == "log":
            if len(st) < 2:
                return raw
            b = st.pop()
            a = st.pop()
            st.append(Segment(f"log({a.text}, {b.text})", FUNC))
        elif t in FUNCTION_TOKENS:
            if not st:
                return raw
            a = st.pop()
            st.append(Segment(f"{t}({a.text})", FUNC))
        elif t == "!":
            if not st:
                return raw
            a = st.pop()
            st.append(Segment(_wrap(a.text, a.prec < FUNC) + "!", FUNC))
        else:
            st.append(Segment(t, ATOM))
    if len(st) != 1:
        return raw
    return st[0].text


def format_answer(tokens, target):
    return f"{render_infix(tokens)} = {target}"
