# texpipe/latex_converter.py
from typing import Callable, Dict, List, Optional, Sequence, Tuple
from lxml import etree

from .parser import LatexParser
from .schemas import MathNode, RootNode
from .symbols import BOUNDARY_VALUES, INTEGRAL_OPERATORS, KNOWN_FUNCTIONS, NARY_OPERATORS, SYMBOL_MAP
from .tokenizer import tokenize

# --- 1. OMML namespace and constants ---
M_NAMESPACE = "http://schemas.openxmlformats.org/officeDocument/2006/math"
XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"
M_PREFIX = "{%s}" % M_NAMESPACE
NSMAP = {'m': M_NAMESPACE}
# Trees deeper than this are refused rather than risking the interpreter recursion limit.
MAX_RENDER_DEPTH = 150


def _m_tag(tag_name: str) -> str: return M_PREFIX + tag_name


# --- 2. OMML element builders ---
def _create_run_omml(text: str, style: Optional[str] = None) -> etree._Element:
    mr = etree.Element(_m_tag('r'))
    if style:
        rpr = etree.SubElement(mr, _m_tag('rPr'))
        sty = etree.SubElement(rpr, _m_tag('sty'))
        sty.set(_m_tag('val'), style)
    mt = etree.SubElement(mr, _m_tag('t'))
    if text.startswith(' ') or text.endswith(' '): mt.set('{%s}space' % XML_NAMESPACE, 'preserve')
    mt.text = text
    return mr


def _create_fraction_omml(num: List[etree._Element], den: List[etree._Element]) -> etree._Element:
    mf = etree.Element(_m_tag('f'))
    mnum = etree.SubElement(mf, _m_tag('num'))
    mden = etree.SubElement(mf, _m_tag('den'))
    for el in num: mnum.append(el)
    for el in den: mden.append(el)
    return mf


def _create_superscript_omml(base: List[etree._Element], sup: List[etree._Element]) -> etree._Element:
    msSup = etree.Element(_m_tag('sSup'))
    me = etree.SubElement(msSup, _m_tag('e'))
    msup = etree.SubElement(msSup, _m_tag('sup'))
    for el in base: me.append(el)
    for el in sup: msup.append(el)
    return msSup


def _create_subscript_omml(base: List[etree._Element], sub: List[etree._Element]) -> etree._Element:
    msSub = etree.Element(_m_tag('sSub'))
    me = etree.SubElement(msSub, _m_tag('e'))
    msub = etree.SubElement(msSub, _m_tag('sub'))
    for el in base: me.append(el)
    for el in sub: msub.append(el)
    return msSub


def _create_subsup_omml(base: List[etree._Element], sub: List[etree._Element],
                        sup: List[etree._Element]) -> etree._Element:
    msSubSup = etree.Element(_m_tag('sSubSup'))
    me = etree.SubElement(msSubSup, _m_tag('e'))
    msub = etree.SubElement(msSubSup, _m_tag('sub'))
    msup = etree.SubElement(msSubSup, _m_tag('sup'))
    for el in base: me.append(el)
    for el in sub: msub.append(el)
    for el in sup: msup.append(el)
    return msSubSup


def _create_nary_omml(op: str, sub: List[etree._Element], sup: List[etree._Element],
                      base: List[etree._Element], lim_loc: str = 'undOvr') -> etree._Element:
    mnary = etree.Element(_m_tag('nary'))
    mnaryPr = etree.SubElement(mnary, _m_tag('naryPr'))
    mchr = etree.SubElement(mnaryPr, _m_tag('chr'))
    mchr.set(_m_tag('val'), op)
    mlimLoc = etree.SubElement(mnaryPr, _m_tag('limLoc'))
    mlimLoc.set(_m_tag('val'), lim_loc)
    # Word still expects empty sub/sup slots, hidden through the properties.
    if not sub: etree.SubElement(mnaryPr, _m_tag('subHide')).set(_m_tag('val'), '1')
    if not sup: etree.SubElement(mnaryPr, _m_tag('supHide')).set(_m_tag('val'), '1')
    msub = etree.SubElement(mnary, _m_tag('sub'))
    msup = etree.SubElement(mnary, _m_tag('sup'))
    me = etree.SubElement(mnary, _m_tag('e'))
    for el in sub: msub.append(el)
    for el in sup: msup.append(el)
    for el in base: me.append(el)
    return mnary


# --- 3. AST -> OMML renderer ---
class FormulaTooDeepError(ValueError):
    """Raised when an AST nests deeper than MAX_RENDER_DEPTH."""


NaryParts = Tuple[str, Optional[MathNode], Optional[MathNode]]


class OmmlRenderer:
    """
    Walks a math AST and builds the equivalent OMML elements.

    Commands missing from the symbol table are written without their backslash and reported
    through ``log_callback``; they are also collected in ``unmapped_symbols``.
    """

    def __init__(self, symbol_map: Optional[Dict[str, str]] = None,
                 nary_operators: Optional[Dict[str, str]] = None,
                 log_callback: Optional[Callable[[str], None]] = None):
        self.symbol_map = dict(SYMBOL_MAP) if symbol_map is None else symbol_map
        self.nary_operators = dict(NARY_OPERATORS) if nary_operators is None else nary_operators
        self.log_callback = log_callback or print
        self.unmapped_symbols: List[str] = []
        self._depth = 0

    def render(self, node: MathNode) -> List[etree._Element]:
        if self._depth >= MAX_RENDER_DEPTH:
            raise FormulaTooDeepError(f"Formula nests deeper than {MAX_RENDER_DEPTH} levels.")
        self._depth += 1
        try:
            return self._render_node(node)
        finally:
            self._depth -= 1

    def _render_node(self, node: MathNode) -> List[etree._Element]:
        if node.type in ('root', 'group'):
            return self._render_sequence(node.children)

        nary = self._split_nary(node)
        if nary is not None:
            return [self._create_nary(nary, [])]

        if node.type == 'text':
            return [_create_run_omml(node.value)]
        if node.type in ('symbol', 'operator'):
            return [self._render_symbol(node.value)]
        if node.type == 'fraction':
            return [_create_fraction_omml(self.render(node.numerator), self.render(node.denominator))]
        if node.type == 'subscript':
            if node.base.type == 'superscript':
                inner = node.base
                return [_create_subsup_omml(self.render(inner.base), self.render(node.sub), self.render(inner.sup))]
            return [_create_subscript_omml(self.render(node.base), self.render(node.sub))]
        if node.type == 'superscript':
            if node.base.type == 'subscript':
                inner = node.base
                return [_create_subsup_omml(self.render(inner.base), self.render(inner.sub), self.render(node.sup))]
            return [_create_superscript_omml(self.render(node.base), self.render(node.sup))]
        return []

    def _render_sequence(self, children: Sequence[MathNode]) -> List[etree._Element]:
        elements: List[etree._Element] = []
        # Large operators still collecting their operand, innermost last.
        open_naries: List[Tuple[NaryParts, List[etree._Element]]] = []
        for child in children:
            # The operand of a large operator runs up to the next +, -, = or relation.
            if open_naries and self._is_boundary(child):
                self._close_naries(open_naries, elements)
            nary = self._split_nary(child)
            if nary is not None:
                open_naries.append((nary, []))
            else:
                target = open_naries[-1][1] if open_naries else elements
                target.extend(self.render(child))
        self._close_naries(open_naries, elements)
        return elements

    def _close_naries(self, open_naries: List[Tuple[NaryParts, List[etree._Element]]],
                      elements: List[etree._Element]) -> None:
        while open_naries:
            nary, body = open_naries.pop()
            target = open_naries[-1][1] if open_naries else elements
            target.append(self._create_nary(nary, body))

    def _split_nary(self, node: MathNode) -> Optional[NaryParts]:
        """Returns (command, lower limit, upper limit) when ``node`` is a large operator with its scripts."""
        sub, sup = None, None
        if node.type == 'superscript':
            sup, node = node.sup, node.base
            if node.type == 'subscript':
                sub, node = node.sub, node.base
        elif node.type == 'subscript':
            sub, node = node.sub, node.base
            if node.type == 'superscript':
                sup, node = node.sup, node.base
        if node.type == 'symbol' and node.value in self.nary_operators:
            return node.value, sub, sup
        return None

    def _create_nary(self, nary: NaryParts, body: List[etree._Element]) -> etree._Element:
        command, sub, sup = nary
        lim_loc = 'subSup' if command in INTEGRAL_OPERATORS else 'undOvr'
        sub_elements = self.render(sub) if sub is not None else []
        sup_elements = self.render(sup) if sup is not None else []
        return _create_nary_omml(self.nary_operators[command], sub_elements, sup_elements, body, lim_loc)

    @staticmethod
    def _is_boundary(node: MathNode) -> bool:
        return node.type in ('operator', 'symbol') and node.value in BOUNDARY_VALUES

    def _render_symbol(self, value: str) -> etree._Element:
        if value in self.symbol_map:
            return _create_run_omml(self.symbol_map[value])
        if value in KNOWN_FUNCTIONS:
            return _create_run_omml(value[1:], style='p')
        if value.startswith('\\'):
            self.unmapped_symbols.append(value)
            self.log_callback(f"Warning: unknown command '{value}', rendered as plain text.")
        return _create_run_omml(value.replace('\\', '', 1))


def ast_to_omath(root: RootNode, renderer: Optional[OmmlRenderer] = None) -> etree._Element:
    """Renders a parsed AST into a single inline ``m:oMath`` element."""
    renderer = renderer or OmmlRenderer()
    omml_math = etree.Element(_m_tag('oMath'), nsmap=NSMAP)
    for el in renderer.render(root): omml_math.append(el)
    return omml_math


def latex_to_omml(latex_string: str, alignment: str = 'center',
                  renderer: Optional[OmmlRenderer] = None) -> Optional[etree._Element]:
    """
    Converts a LaTeX formula into a display ``m:oMathPara`` block.

    Args:
        latex_string (str): The LaTeX source, without surrounding ``$`` delimiters.
        alignment (str): Value of ``m:jc`` ('left', 'center', 'right' or 'centerGroup').
        renderer (Optional[OmmlRenderer]): Renderer to use; a default one is created if omitted.

    Returns:
        Optional[etree._Element]: The ``m:oMathPara`` element, or None when the input has no tokens.

    Raises:
        FormulaTooDeepError: If the parsed tree is deeper than the renderer accepts.
    """
    tokens = tokenize(latex_string)
    if not tokens: return None
    root = LatexParser(tokens).parse()
    omml_para = etree.Element(_m_tag('oMathPara'), nsmap=NSMAP)
    omml_para_pr = etree.SubElement(omml_para, _m_tag('oMathParaPr'))
    jc = etree.SubElement(omml_para_pr, _m_tag('jc')); jc.set(_m_tag('val'), alignment)
    omml_para.append(ast_to_omath(root, renderer))
    return omml_para


def omml_to_string(element: etree._Element) -> str:
    return etree.tostring(element, encoding='unicode')
