"""Turn raw source text into classification features.

Two strategies live here. :func:`whitespace_split` is the crude one used by the
Bayes classifier: every whitespace-delimited chunk is a feature. The
:class:`Tokenizer` scans the character stream into typed tokens for the
order-sensitive match tree.

Both are total: any ``str`` or ``bytes`` input produces a finite result and
never raises.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator

from .types import Token, TokenKind

# Reserved words shared by many C-family and scripting languages.
COMMON_KEYWORDS: frozenset[str] = frozenset(
    {
        "abstract", "and", "as", "async", "await", "begin", "break", "case", "catch",
        "class", "const", "continue", "def", "default", "defer", "del", "do", "elif",
        "else", "end", "enum", "except", "export", "extends", "false", "final",
        "finally", "fn", "for", "foreach", "from", "func", "function", "go", "if",
        "impl", "implements", "import", "in", "interface", "is", "lambda", "let",
        "match", "module", "namespace", "new", "nil", "not", "null", "or", "package",
        "pass", "private", "protected", "public", "raise", "require", "return",
        "select", "self", "static", "struct", "super", "switch", "this", "throw",
        "throws", "trait", "true", "try", "type", "typedef", "unless", "until",
        "use", "using", "val", "var", "void", "when", "where", "while", "with",
        "yield",
    }
)

_TOKEN_RE = re.compile(
    r"""
    (?P<WHITESPACE>\s+)
  | (?P<COMMENT>
        //[^\n]*
      | /\*.*?(?:\*/|\Z)
      | \#(?=[\s!]|\Z)[^\n]*
      | <!--.*?(?:-->|\Z)
    )
  | (?P<STRING>
        \"\"\".*?(?:\"\"\"|\Z)
      | '''.*?(?:'''|\Z)
      | "(?:\\[^\n]|[^"\\\n])*"?
      | '(?:\\[^\n]|[^'\\\n])*'?
      | `(?:\\.|[^`\\])*`?
    )
  | (?P<NUMBER>
        0[xX][0-9a-fA-F_]+[uUlL]*
      | (?:\d[\d_]*(?:\.[\d_]*)?|\.\d[\d_]*)(?:[eE][+-]?\d+)?[a-zA-Z]*
    )
  | (?P<IDENTIFIER>(?:[^\W\d]|\$)(?:\w|\$)*)
  | (?P<OPERATOR>
        ===|!==|>>>=?|<<=|>>=|\*\*=?|\.\.\.|::|->|=>|:=|\?\?
      | ==|!=|<=|>=|&&|\|\||\+\+|--|[-+*/%&|^]=|<<|>>
      | [-+*/%=<>!&|^~?]
    )
  | (?P<PUNCTUATION>[()\[\]{};,.:@\#\\])
  | (?P<UNKNOWN>.)
    """,
    re.VERBOSE | re.DOTALL,
)


def whitespace_split(text: str | bytes | None) -> list[str]:
    """Split ``text`` on whitespace runs; empty input yields an empty list."""

    return as_text(text).split()


class Tokenizer:
    """Regex scanner emitting :class:`Token` values terminated by one ``END`` token."""

    def __init__(self, keywords: Iterable[str] = COMMON_KEYWORDS) -> None:
        self._keywords = frozenset(keywords)

    def tokenize(self, text: str | bytes | None) -> list[Token]:
        return list(self.iter_tokens(text))

    def iter_tokens(self, text: str | bytes | None) -> Iterator[Token]:
        for match in _TOKEN_RE.finditer(as_text(text)):
            group = match.lastgroup
            if group == "WHITESPACE":
                continue
            value = match.group()
            kind = TokenKind[group]
            if kind is TokenKind.IDENTIFIER and value in self._keywords:
                kind = TokenKind.KEYWORD
            yield Token(kind, value)
        yield Token(TokenKind.END, "")


def as_text(text: str | bytes | None) -> str:
    if text is None:
        return ""
    if isinstance(text, (bytes, bytearray)):
        return bytes(text).decode("utf-8", errors="replace")
    return text


__all__ = ["COMMON_KEYWORDS", "Tokenizer", "as_text", "whitespace_split"]
