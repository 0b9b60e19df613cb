# texpipe/tokenizer.py
import re
from typing import List

# Commands, single alphanumerics, single-character operators, braces. Anything else is skipped.
TOKEN_REGEX = re.compile(r"(\\[a-zA-Z]+)|([a-zA-Z0-9])|([\^_=+\-()])|(\{)|(\})")


def tokenize(latex_string: str) -> List[str]:
    """
    Splits a LaTeX math string into a flat list of tokens.

    Multi-digit numbers and multi-letter identifiers are not merged: ``12`` gives ``['1', '2']``.
    Whitespace and characters outside the recognised categories are dropped silently.
    """
    return [match.group(0) for match in TOKEN_REGEX.finditer(latex_string)]
