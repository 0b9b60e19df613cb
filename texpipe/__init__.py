# texpipe/__init__.py
from .parser import LatexParser, parse_latex
from .schemas import MathNode, RootNode
from .tokenizer import tokenize

__all__ = ["LatexParser", "parse_latex", "tokenize", "MathNode", "RootNode"]
