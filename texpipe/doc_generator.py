# texpipe/doc_generator.py
import io
import re
from typing import Callable, Iterable, Optional

from docx import Document
from docx.document import Document as DocumentObject
from docx.shared import Pt, RGBColor
from docx.text.paragraph import Paragraph

from .config import ConverterSettings, build_renderer
from .latex_converter import FormulaTooDeepError, latex_to_omml

CONTROL_CHAR_RE = re.compile(r'[\x00-\x1f\x7f-\x9f]')


def sanitize_latex(latex_text: str) -> str:
    """Removes ASCII and C1 control characters, which python-docx refuses to write."""
    return CONTROL_CHAR_RE.sub('', latex_text)


def add_formula_paragraph(document: DocumentObject, latex_text: str,
                          settings: Optional[ConverterSettings] = None,
                          log_callback: Optional[Callable[[str], None]] = None) -> Paragraph:
    """
    Appends a display formula to ``document``.

    Args:
        document: The python-docx document to write into.
        latex_text (str): LaTeX source of the formula.
        settings (Optional[ConverterSettings]): Alignment, source echo and extra symbols.
        log_callback (Optional[Callable[[str], None]]): Receives warnings such as unknown commands.

    Returns:
        Paragraph: The paragraph holding the ``m:oMathPara`` block, or the red failure notice.
    """
    settings = settings or ConverterSettings()
    latex_text = sanitize_latex(latex_text)

    if settings.show_source:
        code_p = document.add_paragraph(latex_text)
        font = code_p.runs[0].font if code_p.runs else code_p.add_run().font
        font.name = settings.source_font_name
        font.size = Pt(settings.source_font_size)

    renderer = build_renderer(settings, log_callback)
    try:
        omml_element = latex_to_omml(latex_text, alignment=settings.alignment, renderer=renderer)
    except FormulaTooDeepError as e:
        (log_callback or print)(f"Warning: {e}")
        omml_element = None

    p = document.add_paragraph()
    if omml_element is not None:
        p._p.append(omml_element)
    else:
        p.add_run(f"[Formula rendering failed: '{latex_text}']").font.color.rgb = RGBColor(255, 0, 0)
    return p


def create_document(formulas: Iterable[str], title: Optional[str] = None,
                    settings: Optional[ConverterSettings] = None,
                    log_callback: Optional[Callable[[str], None]] = None) -> bytes:
    """Builds a .docx holding one display formula per entry of ``formulas`` and returns its bytes."""
    log = log_callback or print
    doc = Document()
    if title:
        doc.add_heading(sanitize_latex(title), 0)

    for i, latex_text in enumerate(formulas):
        log(f"Processing formula #{i + 1}: {latex_text}")
        add_formula_paragraph(doc, latex_text, settings=settings, log_callback=log)

    stream = io.BytesIO()
    doc.save(stream)
    return stream.getvalue()
