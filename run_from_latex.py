# run_from_latex.py

import sys

from texpipe.config import load_settings
from texpipe.doc_generator import create_document

# Default input and output files
INPUT_LATEX_FILE = 'data/formulas.txt'
OUTPUT_DOCX_FILE = 'output_from_latex.docx'


def read_formulas(filepath):
    """
    Reads one LaTeX formula per line, skipping blank lines and '#' comments.

    Args:
        filepath (str): Path of the text file.

    Returns:
        list: The formulas in file order.
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        lines = [line.strip() for line in f]
    return [line for line in lines if line and not line.startswith('#')]


def main(argv=None):
    """
    Generates a Word document from a file of LaTeX formulas.
    """
    argv = sys.argv[1:] if argv is None else argv
    input_file = argv[0] if len(argv) > 0 else INPUT_LATEX_FILE
    output_file = argv[1] if len(argv) > 1 else OUTPUT_DOCX_FILE

    print(f"📄 Reading formulas from '{input_file}'...")
    try:
        formulas = read_formulas(input_file)
    except (FileNotFoundError, UnicodeDecodeError) as e:
        print(f"Error: could not read the formula file -> {e}")
        return 1

    settings = load_settings()
    docx_bytes = create_document(formulas, title='LaTeX to OMML Conversion', settings=settings)

    with open(output_file, 'wb') as f:
        f.write(docx_bytes)
    print(f"🎉 Saved {len(formulas)} formula(s) to '{output_file}'!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
