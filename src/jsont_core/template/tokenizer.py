"""Split template text into literal and directive tokens."""

import re
from dataclasses import dataclass

from jsont_core.errors import create_error
from jsont_core.types import TokenKind


@dataclass(frozen=True)
class Token:
    """A piece of template text.

    For directives, ``text`` is the content between the metacharacters with
    surrounding whitespace removed, and ``had_newline`` tells whether the
    directive swallowed the newline right after it.
    """

    kind: TokenKind
    text: str
    had_newline: bool = False
    line: int = 1


def split_meta(meta: str) -> tuple[str, str]:
    """Split and validate metacharacters.

    Example: '{}' -> ('{', '}'), '{{}}' -> ('{{', '}}')

    Args:
        meta: Metacharacter string

    Returns:
        (meta_left, meta_right)

    Raises:
        ConfigurationError: If meta is empty or has an odd length
    """
    n = len(meta)
    if n == 0 or n % 2 == 1:
        raise create_error("META_ODD_LENGTH", meta=repr(meta))
    return meta[: n // 2], meta[n // 2 :]


class Tokenizer:
    """Tokenizes template text. Token patterns are memoized per instance."""

    def __init__(self) -> None:
        self._pattern_cache: dict[tuple[str, str], re.Pattern[str]] = {}

    def pattern(self, meta_left: str, meta_right: str) -> re.Pattern[str]:
        """Return the regular expression matching one directive.

        A directive never spans lines. The newline following a directive is
        part of the match.
        """
        key = (meta_left, meta_right)
        token_re = self._pattern_cache.get(key)
        if token_re is None:
            token_re = re.compile(
                "(" + re.escape(meta_left) + ".+?" + re.escape(meta_right) + "\n?)"
            )
            self._pattern_cache[key] = token_re
        return token_re

    def tokenize(self, text: str, meta_left: str, meta_right: str) -> list[Token]:
        """Split text into alternating literal and directive tokens.

        Empty literals are dropped.

        Args:
            text: Template body
            meta_left: Opening metacharacters
            meta_right: Closing metacharacters

        Returns:
            Ordered list of tokens
        """
        tokens: list[Token] = []
        line = 1
        for i, piece in enumerate(self.pattern(meta_left, meta_right).split(text)):
            if i % 2 == 0:
                if piece:
                    tokens.append(Token(TokenKind.LITERAL, piece, line=line))
            else:
                had_newline = piece.endswith("\n")
                body = piece[:-1] if had_newline else piece
                body = body[len(meta_left) : len(body) - len(meta_right)]
                tokens.append(Token(TokenKind.DIRECTIVE, body.strip(), had_newline, line))
            line += piece.count("\n")
        return tokens
