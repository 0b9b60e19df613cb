"""Tests for the recursive-descent LaTeX parser."""

import pytest
from pydantic import ValidationError

from texpipe.parser import MAX_NESTING_DEPTH, LatexParser, parse_latex
from texpipe.schemas import (FractionNode, GroupNode, MathNodeAdapter, OperatorNode, RootNode, SubscriptNode,
                             SuperscriptNode, SymbolNode, TextNode)


class TestLiterals:
    """Letters, digits, operators and commands."""

    def test_whitespace_is_ignored(self, parse):
        assert parse(" y =  2 x ") == parse("y=2x")

    def test_simple_equation(self, parse):
        children = parse("y = 2x")
        assert children == (TextNode(value="y"), OperatorNode(value="="), TextNode(value="2"), TextNode(value="x"))

    def test_greek_letters_are_symbols(self, parse):
        children = parse(r"\alpha + \beta")
        assert children == (SymbolNode(value=r"\alpha"), OperatorNode(value="+"), SymbolNode(value=r"\beta"))

    def test_unknown_command_is_kept_verbatim(self, parse):
        assert parse(r"\doesnotexist") == (SymbolNode(value=r"\doesnotexist"),)

    def test_large_operators_are_symbols(self, parse):
        assert parse(r"\sum \int \prod") == (
            SymbolNode(value=r"\sum"), SymbolNode(value=r"\int"), SymbolNode(value=r"\prod"))

    def test_empty_input(self):
        assert parse_latex("") == RootNode(children=())

    def test_full_equation(self, parse):
        children = parse(r"A = \pi r^2")
        assert len(children) == 4
        assert children[2] == SymbolNode(value=r"\pi")
        assert children[3] == SuperscriptNode(base=TextNode(value="r"), sup=TextNode(value="2"))


class TestGrouping:
    """Brace groups, including unterminated ones."""

    def test_group(self, parse):
        assert parse("{ab}") == (GroupNode(children=(TextNode(value="a"), TextNode(value="b"))),)

    def test_empty_group(self, parse):
        assert parse("{}") == (GroupNode(children=()),)

    def test_unterminated_group(self, parse):
        children = parse("{ab")
        assert len(children) == 1
        assert children[0].type == "group"
        assert children[0].children == (TextNode(value="a"), TextNode(value="b"))

    def test_elements_inside_group_take_scripts(self, parse):
        group = parse("{x^2}")[0]
        assert group.children == (SuperscriptNode(base=TextNode(value="x"), sup=TextNode(value="2")),)

    def test_stray_closing_brace_is_an_operator(self, parse):
        assert parse("a}") == (TextNode(value="a"), OperatorNode(value="}"))


class TestFractions:
    """The \\frac command and its two arguments."""

    def test_simple_fraction(self, parse):
        frac = parse(r"\frac{a}{b}")[0]
        assert frac == FractionNode(numerator=GroupNode(children=(TextNode(value="a"),)),
                                    denominator=GroupNode(children=(TextNode(value="b"),)))

    def test_nested_fraction(self, parse):
        outer = parse(r"\frac{1}{\frac{a}{b}}")[0]
        assert outer.type == "fraction"
        assert outer.denominator.type == "group"
        inner = outer.denominator.children[0]
        assert inner.type == "fraction"
        assert inner.numerator.children[0] == TextNode(value="a")
        assert inner.denominator.children[0] == TextNode(value="b")

    def test_bare_arguments(self, parse):
        assert parse(r"\frac12") == (FractionNode(numerator=TextNode(value="1"), denominator=TextNode(value="2")),)

    def test_bare_argument_keeps_its_scripts(self, parse):
        frac = parse(r"\frac a^2 b")[0]
        assert frac.numerator == SuperscriptNode(base=TextNode(value="a"), sup=TextNode(value="2"))
        assert frac.denominator == TextNode(value="b")

    def test_missing_arguments(self, parse):
        frac = parse(r"\frac")[0]
        assert frac == FractionNode(numerator=TextNode(value=""), denominator=TextNode(value=""))

    def test_fraction_takes_scripts(self, parse):
        node = parse(r"\frac{a}{b}^2")[0]
        assert node.type == "superscript"
        assert node.base.type == "fraction"


class TestScripts:
    """Subscript and superscript attachment and precedence."""

    def test_subscript(self, parse):
        assert parse("x_i") == (SubscriptNode(base=TextNode(value="x"), sub=TextNode(value="i")),)

    def test_superscript(self, parse):
        assert parse("x^2") == (SuperscriptNode(base=TextNode(value="x"), sup=TextNode(value="2")),)

    def test_subscript_then_superscript(self, parse):
        node = parse("x_i^2")[0]
        assert node == SuperscriptNode(
            base=SubscriptNode(base=TextNode(value="x"), sub=TextNode(value="i")),
            sup=TextNode(value="2"))

    def test_script_argument_does_not_take_following_script(self, parse):
        top = parse("x_i^2")[0]
        assert top.type == "superscript"
        assert top.base.type == "subscript"
        assert top.base.sub.type == "text"

    def test_superscript_then_subscript(self, parse):
        node = parse("x^2_i")[0]
        assert node == SubscriptNode(
            base=SuperscriptNode(base=TextNode(value="x"), sup=TextNode(value="2")),
            sub=TextNode(value="i"))

    def test_grouped_subscript(self, parse):
        node = parse("x_{i+1}")[0]
        assert node.type == "subscript"
        assert node.sub == GroupNode(children=(TextNode(value="i"), OperatorNode(value="+"), TextNode(value="1")))

    def test_script_on_group(self, parse):
        node = parse("{a+b}^2")[0]
        assert node.type == "superscript"
        assert node.base.type == "group"

    def test_dangling_subscript(self, parse):
        assert parse("x_") == (SubscriptNode(base=TextNode(value="x"), sub=TextNode(value="")),)

    def test_dangling_superscript_in_group(self, parse):
        group = parse("{x^}")[0]
        assert group.children == (SuperscriptNode(base=TextNode(value="x"), sup=OperatorNode(value="}")),)

    def test_leading_script(self, parse):
        assert parse("^2") == (OperatorNode(value="^"), TextNode(value="2"))

    def test_definite_integral(self, parse):
        sup = parse(r"\int_a^b")[0]
        assert sup.type == "superscript"
        assert sup.sup == TextNode(value="b")
        assert sup.base.type == "subscript"
        assert sup.base.sub == TextNode(value="a")
        assert sup.base.base == SymbolNode(value=r"\int")

    def test_sum_with_limits(self, parse):
        sup = parse(r"\sum_{n=0}^{\infty}")[0]
        assert sup.type == "superscript"
        sub = sup.base
        assert sub.type == "subscript"
        assert sub.base == SymbolNode(value=r"\sum")
        assert sub.sub == GroupNode(children=(TextNode(value="n"), OperatorNode(value="="), TextNode(value="0")))
        assert sup.sup == GroupNode(children=(SymbolNode(value=r"\infty"),))


class TestArgumentPolicy:
    """The argument-consumption helper in isolation."""

    def test_braced_argument_is_a_group(self):
        parser = LatexParser("{ab}c")
        assert parser.parse_argument(greedy=False) == GroupNode(children=(TextNode(value="a"), TextNode(value="b")))
        assert parser.peek() == "c"

    def test_non_greedy_stops_before_scripts(self):
        parser = LatexParser("i^2")
        assert parser.parse_argument(greedy=False) == TextNode(value="i")
        assert parser.peek() == "^"

    def test_greedy_takes_scripts(self):
        parser = LatexParser("i^2")
        assert parser.parse_argument(greedy=True) == SuperscriptNode(base=TextNode(value="i"), sup=TextNode(value="2"))
        assert parser.peek() is None

    def test_empty_argument(self):
        assert LatexParser("").parse_argument(greedy=True) == TextNode(value="")


class TestCursor:
    """peek/consume/expect primitives."""

    def test_expect_consumes_only_on_match(self):
        parser = LatexParser(["a", "}"])
        assert parser.expect("}") is False
        assert parser.peek() == "a"
        parser.consume()
        assert parser.expect("}") is True
        assert parser.peek() is None

    def test_consume_at_end_returns_none(self):
        parser = LatexParser([])
        assert parser.consume() is None
        assert parser.pos == 0

    def test_parser_accepts_token_list(self):
        assert LatexParser(["x", "_", "i"]).parse() == parse_latex("x_i")


class TestPurity:
    """Parses are independent and their results immutable."""

    def test_same_input_gives_equal_but_distinct_trees(self):
        first = parse_latex(r"\frac{x_i^2}{y}")
        second = parse_latex(r"\frac{x_i^2}{y}")
        assert first == second
        assert first is not second
        assert first.children[0] is not second.children[0]

    def test_nodes_are_frozen(self):
        node = parse_latex("x").children[0]
        with pytest.raises(ValidationError):
            node.value = "y"

    def test_dump_round_trip(self):
        root = parse_latex(r"\sum_{n=0}^{\infty} \frac{1}{n^2}")
        assert MathNodeAdapter.validate_python(root.model_dump()) == root

    @pytest.mark.parametrize("latex", ["}", "{{{", "_^_^", r"\frac{", "x_{", "^", "{}}}", r"\frac\frac",
                                       "{" * 600 + "x", "x" + "^{" * 600, "\\frac" * 1200, "x" + "_1" * 2000])
    def test_malformed_input_never_raises(self, latex):
        assert parse_latex(latex).type == "root"


def _tree_depth(node):
    deepest, stack = 0, [(node, 1)]
    while stack:
        current, level = stack.pop()
        deepest = max(deepest, level)
        for name in ('children', 'numerator', 'denominator', 'base', 'sub', 'sup'):
            value = getattr(current, name, None)
            if isinstance(value, tuple):
                stack.extend((child, level + 1) for child in value)
            elif value is not None:
                stack.append((value, level + 1))
    return deepest


class TestNestingLimit:
    """Deep input is flattened past MAX_NESTING_DEPTH instead of recursing."""

    def test_nesting_below_limit_is_kept(self, parse):
        node = parse("{" * 30 + "x" + "}" * 30)[0]
        for _ in range(29):
            assert node.type == "group"
            (node,) = node.children
        assert node == GroupNode(children=(TextNode(value="x"),))

    @pytest.mark.parametrize("latex", ["{" * 600 + "x", "x" + "^{" * 600, "\\frac" * 1200, "x" + "_1" * 2000])
    def test_tree_depth_is_bounded(self, latex):
        assert _tree_depth(parse_latex(latex)) <= MAX_NESTING_DEPTH + 3

    def test_braces_past_limit_become_operators(self):
        root = parse_latex("{" * (MAX_NESTING_DEPTH + 5) + "x")
        node = root
        while node.children and node.children[0].type == "group":
            node = node.children[0]
        assert node.children == (OperatorNode(value="{"),) * 5 + (TextNode(value="x"),)

    def test_fraction_past_limit_becomes_symbol(self):
        node = parse_latex("\\frac" * (MAX_NESTING_DEPTH + 1) + "ab").children[0]
        while node.type == "fraction":
            node = node.numerator
        assert node == SymbolNode(value="\\frac")

    def test_script_chain_past_limit_keeps_tokens(self, parse):
        children = parse("x" + "_1" * (MAX_NESTING_DEPTH + 1))
        assert children[0].type == "subscript"
        assert children[1:] == (OperatorNode(value="_"), TextNode(value="1"))

    def test_script_chain_over_nested_argument_is_bounded(self):
        latex = "x_" + "{" * (MAX_NESTING_DEPTH - 1) + "}" * (MAX_NESTING_DEPTH - 1) + "_1" * 60
        assert _tree_depth(parse_latex(latex)) <= 2 * MAX_NESTING_DEPTH + 3
