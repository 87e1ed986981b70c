"""Template expression classification and syntax checking.

Template values are either literals or expressions evaluated by the service
against the push variables of each registration at send time:

    $(prop)            string property
    $(prop:{default})  string property with default value
    #(prop)            numeric property
    .(prop,10)         property truncated to 10 characters with ellipsis
    %(prop)            URL-encoded property
    {$(a) + 'b'}       composite of tokens and quoted literals
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .errors import UnsupportedExpressionError, UNSUPPORTED_EXPRESSION


class ExpressionType(Enum):
    LITERAL = "literal"
    NUMERIC = "numeric"
    STRING = "string"
    COMPOSITE = "composite"

    @property
    def is_literal(self) -> bool:
        return self is ExpressionType.LITERAL


class TokenType(Enum):
    DOLLAR = "$"
    HASH = "#"
    DOT = "."
    PERCENTAGE = "%"
    SINGLE_LITERAL = "'"
    DOUBLE_LITERAL = '"'
    BODY = "$body"


@dataclass
class Token:
    type: TokenType
    property: Optional[str] = None
    default_value: Optional[str] = None
    length: int = 0
    empty_string: bool = False


_TOKEN_TYPES = {
    '.': TokenType.DOT,
    '%': TokenType.PERCENTAGE,
    '#': TokenType.HASH,
    '$': TokenType.DOLLAR,
    "'": TokenType.SINGLE_LITERAL,
    '"': TokenType.DOUBLE_LITERAL,
}

_INTEGER_PATTERN = re.compile(r'^\s*[+-]?\d+\s*$')


def _fail(message: str, expression: str) -> UnsupportedExpressionError:
    return UnsupportedExpressionError(
        UNSUPPORTED_EXPRESSION, message, {"expression": expression})


class ExpressionEvaluator:
    """Classifies template values and rejects malformed expressions."""

    BODY_EXPRESSION = "$body"
    MAX_PROPERTY_NAME_LENGTH = 120
    PROPERTY_NAME_PATTERN = re.compile(r'^[A-Za-z0-9_]+$')

    @classmethod
    def validate(cls, expression: Optional[str]) -> ExpressionType:
        """Classify a template value and check its syntax.

        Args:
            expression: Header value, attribute value or text from a template

        Returns:
            The ExpressionType of the value; LITERAL for plain text

        Raises:
            UnsupportedExpressionError: If the value starts like an
                expression but is malformed, or references ``$body``
        """
        expression_type, tokens = cls._tokenize(expression)
        if any(token.type is TokenType.BODY for token in tokens):
            raise _fail("$body is not supported in template expressions", expression)
        return expression_type

    @classmethod
    def peek_expression_type(cls, expression: Optional[str]) -> ExpressionType:
        if not expression or not expression.strip():
            return ExpressionType.LITERAL

        first = expression[0]
        if first in '$.%':
            return ExpressionType.STRING
        if first == '#':
            return ExpressionType.NUMERIC
        if first == '{':
            return ExpressionType.COMPOSITE
        return ExpressionType.LITERAL

    @classmethod
    def _tokenize(cls, expression: Optional[str]) -> Tuple[ExpressionType, List[Token]]:
        expression_type = cls.peek_expression_type(expression)
        if expression_type is ExpressionType.LITERAL:
            return expression_type, []

        working = expression
        if expression_type is ExpressionType.COMPOSITE:
            if expression[-1] != '}':
                raise _fail(
                    f"Expression '{expression}' is missing the closing '}}'", expression)
            working = expression[1:-1].rstrip()

        tokens: List[Token] = []
        while True:
            working = working.lstrip()
            if len(working) < 3:
                raise _fail(
                    f"Expression '{expression}' has an invalid token '{working}'", expression)

            first = working[0]
            if first not in _TOKEN_TYPES:
                raise _fail(
                    f"Expression '{expression}' has an invalid token type at '{working}'",
                    expression)

            token = Token(_TOKEN_TYPES[first])
            if token.type in (TokenType.SINGLE_LITERAL, TokenType.DOUBLE_LITERAL):
                end = cls._extract_literal(expression, working, token)
            elif token.type is TokenType.DOLLAR and working.lower().startswith(cls.BODY_EXPRESSION):
                token.type = TokenType.BODY
                end = len(cls.BODY_EXPRESSION) - 1
            else:
                end = cls._extract_token(expression, working, token)

            if (token.type not in (TokenType.SINGLE_LITERAL, TokenType.DOUBLE_LITERAL, TokenType.BODY)
                    and token.property.lower() != cls.BODY_EXPRESSION):
                cls._check_property_name(token.property, expression)

            tokens.append(token)

            if len(working) == end + 1:
                break

            working = working[end + 1:].lstrip()
            if not working.startswith('+'):
                raise _fail(
                    f"Expression '{expression}' must join tokens with '+' near '{working}'",
                    expression)
            working = working[1:]

        if len(tokens) > 1 and any(t.type is TokenType.HASH for t in tokens):
            raise _fail("Numeric '#' tokens cannot be used in a composite expression", expression)

        return expression_type, tokens

    @classmethod
    def _check_property_name(cls, name: str, expression: str) -> None:
        if not cls.PROPERTY_NAME_PATTERN.match(name):
            raise _fail(f"Property name '{name}' contains invalid characters", expression)
        if len(name) > cls.MAX_PROPERTY_NAME_LENGTH:
            raise _fail(
                f"Property name is {len(name)} characters long; "
                f"the maximum is {cls.MAX_PROPERTY_NAME_LENGTH}",
                expression)

    @staticmethod
    def _extract_literal(expression: str, working: str, token: Token) -> int:
        separator = token.type.value
        start = 1
        escaped = False
        while True:
            end = working.find(separator, start)
            if end == -1:
                raise _fail(
                    f"Expression '{expression}' has an unterminated literal at '{working}'",
                    expression)

            # doubled separator is an escaped quote
            if end + 1 < len(working) and working[end + 1] == separator:
                escaped = True
                start = end + 2
                continue

            literal = working[1:end]
            token.property = literal.replace(separator * 2, separator) if escaped else literal
            return end

    @staticmethod
    def _extract_token(expression: str, working: str, token: Token) -> int:
        if working[1] != '(':
            raise _fail(
                f"Expression '{expression}' is missing '(' at '{working}'", expression)

        close = working.find(')')
        comma = working.find(',')
        default_begin = working.find(':{')
        default_length = 0

        # default values may contain any character, including ')' and ','
        if 1 < default_begin < close:
            if default_begin < 3:
                raise _fail(
                    f"Expression '{expression}' is missing a property name at '{working}'",
                    expression)

            default_end = default_begin + 2
            escape = False
            while True:
                if default_end >= len(working):
                    raise _fail(
                        f"Expression '{expression}' is missing the end of the default value",
                        expression)
                if working[default_end] == '}' and not escape:
                    break
                escape = working[default_end] == '\\' and not escape
                default_end += 1

            default_length = default_end - default_begin + 1
            token.default_value = working[default_begin + 2:default_end]
            comma = working.find(',', default_end)
            close = working.find(')', default_end)

        if close == -1:
            raise _fail(
                f"Expression '{expression}' is missing ')' at '{working}'", expression)

        has_length = comma != -1 and comma < close
        if token.type in (TokenType.PERCENTAGE, TokenType.HASH) and has_length:
            raise _fail(
                f"Expression '{expression}' cannot take a length with '%' or '#'", expression)
        if token.type is TokenType.DOT and comma == -1:
            raise _fail(
                f"Expression '{expression}' requires a length with '.'", expression)

        if has_length:
            length_text = working[comma + 1:close]
            if not _INTEGER_PATTERN.match(length_text) or int(length_text) < 0:
                raise _fail(
                    f"Expression '{expression}' has a length '{length_text}' "
                    "that is not a positive integer",
                    expression)
            token.length = int(length_text)
            token.empty_string = token.length == 0
            token.property = working[2:comma - default_length]
        else:
            token.property = working[2:close - default_length]

        token.property = token.property.strip()
        return close
