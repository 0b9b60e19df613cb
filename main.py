# main.py

from typing import List, Literal, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel

from texpipe.config import build_renderer, load_settings
from texpipe.doc_generator import create_document
from texpipe.latex_converter import FormulaTooDeepError, latex_to_omml, omml_to_string
from texpipe.parser import parse_latex

DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class ParseRequest(BaseModel):
    latex: str


class OmmlRequest(BaseModel):
    latex: str
    alignment: Optional[Literal['left', 'center', 'right', 'centerGroup']] = None


class DocxRequest(BaseModel):
    formulas: List[str]
    title: Optional[str] = None


settings = load_settings()

app = FastAPI(
    title="TexPipe API",
    description="Converts LaTeX math into Word (OMML) equations",
    version="1.0.0",
)

origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
def read_root():
    """
    Health check.

    Returns:
        dict: A welcome message.
    """
    return {"message": "TexPipe API is running!"}


@app.post("/parse")
def parse_endpoint(request: ParseRequest):
    """Returns the math AST of a LaTeX formula as JSON."""
    return {"ast": parse_latex(request.latex).model_dump()}


@app.post("/convert/omml")
def convert_omml_endpoint(request: OmmlRequest):
    """
    Converts one formula into an ``m:oMathPara`` XML block.

    Unknown commands do not fail the request; they are listed in ``unmapped_symbols``.
    """
    if not request.latex.strip():
        raise HTTPException(status_code=400, detail="LaTeX cannot be empty.")

    renderer = build_renderer(settings)
    try:
        omml_element = latex_to_omml(request.latex, alignment=request.alignment or settings.alignment,
                                     renderer=renderer)
    except FormulaTooDeepError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if omml_element is None:
        raise HTTPException(status_code=400, detail="LaTeX contains no recognisable math tokens.")

    return {"omml": omml_to_string(omml_element), "unmapped_symbols": renderer.unmapped_symbols}


@app.post("/convert/docx")
def convert_docx_endpoint(request: DocxRequest):
    """Builds a Word document with one display formula per entry of ``formulas``."""
    if not request.formulas:
        raise HTTPException(status_code=400, detail="At least one formula is required.")

    docx_bytes = create_document(request.formulas, title=request.title, settings=settings)
    return Response(
        content=docx_bytes,
        media_type=DOCX_MIME_TYPE,
        headers={"Content-Disposition": 'attachment; filename="formulas.docx"'},
    )
