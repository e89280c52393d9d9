"""
Quote-aware whitespace tokenizer.

A token is either the content between a matching pair of double quotes,
single quotes, or backticks (quotes stripped, whitespace preserved), or a
maximal run of non-whitespace characters. There is no escaping: an
unterminated quote is matched by the non-whitespace rule and stays part of
the word.

    >>> tokenize('push "my remote" `x y`')
    ['push', 'my remote', 'x y']
"""
import re

_TOKENIZER = re.compile(r'"([^"]*)"|\'([^\']*)\'|`([^`]*)`|(\S+)')


def tokenize(text, /):
    """
    Split a line into tokens (see module docstring for the quoting rules).

    Raises
    - TypeError: if text is not a string.
    """
    if not isinstance(text, str):
        raise TypeError("tokenize() argument must be a string")
    return [
        next((group for group in match.groups() if group is not None), "")
        for match in _TOKENIZER.finditer(text)
    ]


__all__ = (
    "tokenize",
)
