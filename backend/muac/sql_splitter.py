"""Split a SQL script into standalone statements.

One left-to-right pass with a single lexer mode:

* ``NORMAL``        - ``;`` terminates the current statement
* ``LITERAL``       - inside a single-quoted string
* ``LINE_COMMENT``  - from ``--`` to the end of the line
* ``BLOCK_COMMENT`` - from ``/*`` to the first ``*/``

Known limitations, acceptable for scripts we author ourselves:
block comments do not nest, and a backslash-escaped quote inside a literal
still closes it. A doubled quote (``''``) closes and reopens the literal,
which leaves the mode correct.
"""

from __future__ import annotations

from enum import Enum


class _Mode(Enum):
    NORMAL = "normal"
    LITERAL = "literal"
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"


TERMINATOR = ";"


def split(script: str) -> list[str]:
    """Return the executable statements of ``script`` in order.

    Statements are trimmed and carry no terminator. Comments stay attached to
    the statement that follows them; a chunk holding only comments and
    whitespace is not an executable unit and is dropped.
    """

    statements: list[str] = []
    buf: list[str] = []
    has_code = False
    mode = _Mode.NORMAL
    i = 0
    length = len(script)

    def _emit() -> None:
        nonlocal buf, has_code
        stmt = "".join(buf).strip()
        if stmt and has_code:
            statements.append(stmt)
        buf = []
        has_code = False

    while i < length:
        ch = script[i]
        nxt = script[i + 1] if i + 1 < length else ""

        if mode is _Mode.LINE_COMMENT:
            buf.append(ch)
            if ch in ("\n", "\r"):
                mode = _Mode.NORMAL
            i += 1
            continue

        if mode is _Mode.BLOCK_COMMENT:
            if ch == "*" and nxt == "/":
                buf.append("*/")
                mode = _Mode.NORMAL
                i += 2
                continue
            buf.append(ch)
            i += 1
            continue

        if mode is _Mode.LITERAL:
            buf.append(ch)
            if ch == "'":
                mode = _Mode.NORMAL
            i += 1
            continue

        if ch == "-" and nxt == "-":
            buf.append("--")
            mode = _Mode.LINE_COMMENT
            i += 2
            continue

        if ch == "/" and nxt == "*":
            buf.append("/*")
            mode = _Mode.BLOCK_COMMENT
            i += 2
            continue

        if ch == "'":
            buf.append(ch)
            has_code = True
            mode = _Mode.LITERAL
            i += 1
            continue

        if ch == TERMINATOR:
            _emit()
            i += 1
            continue

        buf.append(ch)
        if not ch.isspace():
            has_code = True
        i += 1

    _emit()
    return statements
