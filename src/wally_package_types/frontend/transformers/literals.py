"""
String literal decoding - Extracted from the expression transformer
Turns quoted and long-bracket string tokens into their content.
"""

import re

_ESCAPES = {
    'a': '\a', 'b': '\b', 'f': '\f', 'n': '\n', 'r': '\r', 't': '\t', 'v': '\v',
    '\\': '\\', '"': '"', "'": "'", '\n': '\n',
}

_ESCAPE_PATTERN = re.compile(r'\\(z\s*|x[0-9a-fA-F]{2}|u\{[0-9a-fA-F]+\}|[0-9]{1,3}|[\s\S])')

LONG_BRACKET_OPEN = re.compile(r'\[(=*)\[')


def string_value(literal: str) -> str:
    """Content of a quoted or long-bracket string literal."""
    opening = LONG_BRACKET_OPEN.match(literal)
    if opening:
        width = len(opening.group(0))
        content = literal[width:-width]
        # A newline right after the opening bracket is not part of the string
        if content.startswith('\r\n'):
            return content[2:]
        if content.startswith('\n'):
            return content[1:]
        return content

    def unescape(match):
        escape = match.group(1)
        head = escape[0]
        if head == 'z':
            return ''
        if head == 'x':
            return chr(int(escape[1:], 16))
        if head == 'u':
            return chr(int(escape[2:-1], 16))
        if head.isdigit():
            return chr(int(escape))
        return _ESCAPES.get(head, escape)

    return _ESCAPE_PATTERN.sub(unescape, literal[1:-1])
