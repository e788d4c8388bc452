"""Split expression text into tokens."""
import logging
from typing import List

from arithmetic_evaluator.common.errors import UnrecognizedCharacterError
from arithmetic_evaluator.common.logger import logger
from arithmetic_evaluator.common.tokens import (
    NUMBER_CHARACTERS,
    OPERATOR_SYMBOLS,
    LeftSeparator,
    NumberToken,
    Operation,
    OperatorToken,
    RightSeparator,
    Token,
    format_tokens,
)


def tokenize(text: str) -> List[Token]:
    """
    Split an arithmetic expression into tokens in a single left-to-right pass.

    Whitespace is insignificant. A maximal run of digits and dots becomes one
    number token holding the exact substring, so "1.2.3" is a single token;
    whether it is a valid decimal is only decided at evaluation time.

    :param str text: Arithmetic expression as a string

    :return: List of tokens
    :rtype: List[Token]
    :raises UnrecognizedCharacterError: If a character is outside the grammar
    """
    tokens: List[Token] = []
    position: int = 0
    length: int = len(text)

    while position < length:
        char = text[position]

        if char.isspace():
            position += 1
            continue

        if char in NUMBER_CHARACTERS:
            end = position + 1
            while end < length and text[end] in NUMBER_CHARACTERS:
                end += 1
            tokens.append(NumberToken(text=text[position:end]))
            position = end
            continue

        if char == "(":
            tokens.append(LeftSeparator())
        elif char == ")":
            tokens.append(RightSeparator())
        elif char in OPERATOR_SYMBOLS:
            tokens.append(OperatorToken(op=Operation(char)))
        else:
            raise UnrecognizedCharacterError(char, position)
        position += 1

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Tokenized %r into: %s", text, format_tokens(tokens))
    return tokens
