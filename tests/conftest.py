"""
Shared pytest fixtures for the tokenizer, parser and OMML rendering tests.
"""

import pytest

from texpipe.latex_converter import M_NAMESPACE, OmmlRenderer
from texpipe.parser import parse_latex

NS = {'m': M_NAMESPACE}


@pytest.fixture
def parse():
    """Parses a LaTeX string and returns the root's children."""
    def _parse(latex):
        return parse_latex(latex).children
    return _parse


@pytest.fixture
def log_messages():
    """A list that collects whatever is passed to a log callback."""
    return []


@pytest.fixture
def renderer(log_messages):
    """Renderer with default tables whose warnings go to ``log_messages``."""
    return OmmlRenderer(log_callback=log_messages.append)


@pytest.fixture
def xpath():
    """Runs an XPath query with the ``m`` prefix bound to the OMML namespace."""
    def _xpath(element, query):
        return element.xpath(query, namespaces=NS)
    return _xpath
