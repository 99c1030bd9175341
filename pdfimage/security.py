from __future__ import annotations

import re
import shlex

from .errors import InvalidInputError

# Operators a shell treats as word boundaries. '#' starts a comment, which
# also counts as a separate token.
_BREAK_CHARS = "();<>|&#"

# Characters still interpreted inside "...": they could close the quote or
# run a command. A '$' is live only when it starts an expansion.
_LIVE_IN_QUOTES = re.compile(r'["`\\]|\$[({A-Za-z0-9_$?!#@*-]')


def _count_tokens(value: str) -> int:
    lexer = shlex.shlex(value, posix=True, punctuation_chars=_BREAK_CHARS)
    lexer.whitespace_split = True
    lexer.commenters = ""
    count = 0
    try:
        for _ in lexer:
            count += 1
    except ValueError:
        # Unterminated quote: the rest of the input is one word.
        count += 1
    return count


def is_single_word(value: str) -> bool:
    """True if a shell would read ``value`` as at most one word."""
    return _count_tokens(value) <= 1


def validate_command_break(value: str) -> str:
    """Return ``value`` unchanged if it is safe as one shell word.

    Raises InvalidInputError when substituting ``value`` into a command line
    would yield more than one argument (bare whitespace, ``&``, ``|``, ``;``,
    redirections, parentheses or a comment), or when it contains a double
    quote, backquote, backslash or ``$`` expansion that would still be
    interpreted inside double quotes.
    """
    if _LIVE_IN_QUOTES.search(value) or not is_single_word(value):
        raise InvalidInputError()
    return value
