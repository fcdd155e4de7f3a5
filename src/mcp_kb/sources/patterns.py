"""Glob-like path pattern compiler.

Patterns are tokenized first and then translated to an anchored regex,
so an expansion is never re-expanded by a later rule:

- ``**`` matches any run of characters, including ``/``
- ``*`` matches any run of characters except ``/``
- ``?`` matches exactly one character
- ``[abc]`` / ``[!abc]`` match one character from (or not from) a set
- everything else, ``.`` included, matches literally
"""

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Iterable

import structlog

from mcp_kb.core.exceptions import PatternError

logger = structlog.get_logger(__name__)


class TokenType(str, Enum):
    LITERAL = "literal"
    GLOBSTAR = "globstar"
    STAR = "star"
    QUESTION = "question"
    CHAR_CLASS = "char_class"


@dataclass(frozen=True)
class Token:
    type: TokenType
    text: str = ""


def tokenize(pattern: str) -> list[Token]:
    """Split a pattern into tokens.

    Raises PatternError for an empty pattern or an unterminated class.
    """
    if not pattern:
        raise PatternError("Empty pattern", details={"pattern": pattern})

    tokens: list[Token] = []
    i = 0
    while i < len(pattern):
        char = pattern[i]
        if char == "*":
            if pattern.startswith("**", i):
                tokens.append(Token(TokenType.GLOBSTAR))
                i += 2
            else:
                tokens.append(Token(TokenType.STAR))
                i += 1
        elif char == "?":
            tokens.append(Token(TokenType.QUESTION))
            i += 1
        elif char == "[":
            # A "]" right after "[" (or "[!") is a member, not the terminator
            start = i + 1
            if start < len(pattern) and pattern[start] == "!":
                start += 1
            end = pattern.find("]", start + 1)
            if end == -1:
                raise PatternError(
                    "Unterminated character class",
                    details={"pattern": pattern, "position": i},
                )
            tokens.append(Token(TokenType.CHAR_CLASS, pattern[i + 1 : end]))
            i = end + 1
        else:
            tokens.append(Token(TokenType.LITERAL, char))
            i += 1
    return tokens


def _translate_class(body: str) -> str:
    negate = body.startswith("!")
    if negate:
        body = body[1:]
    body = body.replace("\\", "\\\\").replace("[", "\\[")
    if body.startswith("^"):
        body = "\\" + body
    return f"[{'^' if negate else ''}{body}]"


def translate(tokens: Iterable[Token]) -> str:
    """Translate tokens to a regex body (without anchors)."""
    parts: list[str] = []
    for token in tokens:
        if token.type is TokenType.GLOBSTAR:
            parts.append(".*")
        elif token.type is TokenType.STAR:
            parts.append("[^/]*")
        elif token.type is TokenType.QUESTION:
            parts.append(".")
        elif token.type is TokenType.CHAR_CLASS:
            parts.append(_translate_class(token.text))
        else:
            parts.append(re.escape(token.text))
    return "".join(parts)


@dataclass(frozen=True)
class Matcher:
    """A compiled pattern. ``test`` is a full-string match."""

    pattern: str
    regex: re.Pattern

    def test(self, path: str) -> bool:
        return self.regex.fullmatch(path) is not None


@lru_cache(maxsize=1024)
def compile_pattern(pattern: str) -> Matcher:
    """Compile a glob-like pattern into a Matcher."""
    body = translate(tokenize(pattern))
    try:
        regex = re.compile(body)
    except re.error as e:
        raise PatternError(
            f"Invalid pattern {pattern!r}: {e}",
            details={"pattern": pattern},
        ) from e
    return Matcher(pattern=pattern, regex=regex)


def any_match(matchers: Iterable[Matcher], path: str) -> bool:
    """True if any compiled pattern matches the path."""
    return any(matcher.test(path) for matcher in matchers)


class PatternSet:
    """Compiled include/exclude patterns of one repository.

    A path is eligible when an include matches and no exclude does; an
    empty include set matches nothing.

    Never raises. A malformed include matches nothing and a malformed
    exclude matches everything. Patterns in ``shared_excludes`` apply to
    every repository and are skipped when malformed.
    """

    def __init__(
        self,
        includes: Iterable[str],
        excludes: Iterable[str],
        shared_excludes: Iterable[str] = (),
    ) -> None:
        self.includes: list[Matcher] = []
        self.excludes: list[Matcher] = []
        self._exclude_everything = False
        self.malformed: list[str] = []

        for pattern in includes:
            matcher = self._compile(pattern, "include")
            if matcher is not None:
                self.includes.append(matcher)

        for pattern in excludes:
            matcher = self._compile(pattern, "exclude")
            if matcher is None:
                self._exclude_everything = True
            else:
                self.excludes.append(matcher)

        for pattern in shared_excludes:
            try:
                self.excludes.append(compile_pattern(pattern))
            except PatternError as e:
                self.malformed.append(pattern)
                logger.warning("Skipping malformed shared exclude", pattern=pattern, error=e.message)

    def _compile(self, pattern: str, role: str) -> Matcher | None:
        try:
            return compile_pattern(pattern)
        except PatternError as e:
            self.malformed.append(pattern)
            logger.error(
                "Malformed pattern, failing closed",
                pattern=pattern,
                role=role,
                error=e.message,
            )
            return None

    def is_eligible(self, path: str) -> bool:
        if self._exclude_everything:
            return False
        return any_match(self.includes, path) and not any_match(self.excludes, path)
