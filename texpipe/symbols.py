# texpipe/symbols.py

# --- Symbol and Function Maps ---
GREEK_LETTERS = {'\\alpha': 'α', '\\beta': 'β', '\\gamma': 'γ', '\\delta': 'δ', '\\epsilon': 'ε', '\\zeta': 'ζ',
                 '\\eta': 'η', '\\theta': 'θ', '\\iota': 'ι', '\\kappa': 'κ', '\\lambda': 'λ', '\\mu': 'μ', '\\nu': 'ν',
                 '\\xi': 'ξ', '\\omicron': 'ο', '\\pi': 'π', '\\rho': 'ρ', '\\sigma': 'σ', '\\tau': 'τ',
                 '\\upsilon': 'υ', '\\phi': 'φ', '\\chi': 'χ', '\\psi': 'ψ', '\\omega': 'ω', '\\Gamma': 'Γ',
                 '\\Delta': 'Δ', '\\Theta': 'Θ', '\\Lambda': 'Λ', '\\Xi': 'Ξ', '\\Pi': 'Π', '\\Sigma': 'Σ',
                 '\\Upsilon': 'Υ', '\\Phi': 'Φ', '\\Psi': 'Ψ', '\\Omega': 'Ω', '\\varepsilon': 'ɛ', '\\vartheta': 'ϑ',
                 '\\varpi': 'ϖ', '\\varrho': 'ϱ', '\\varsigma': 'ς', '\\varphi': 'ϕ'}
OPERATORS = {'\\pm': '±', '\\mp': '∓', '\\times': '×', '\\div': '÷', '\\cdot': '⋅', '\\ast': '∗', '\\cup': '∪',
             '\\cap': '∩', '\\in': '∈', '\\notin': '∉', '\\subset': '⊂', '\\supset': '⊃', '\\subseteq': '⊆',
             '\\supseteq': '⊇', '\\neq': '≠', '\\ne': '≠', '\\equiv': '≡', '\\approx': '≈', '\\sim': '∼',
             '\\propto': '∝', '\\le': '≤', '\\leq': '≤', '\\ge': '≥', '\\geq': '≥', '\\ll': '≪', '\\gg': '≫',
             '\\infty': '∞', '\\nabla': '∇', '\\partial': '∂', '\\forall': '∀', '\\exists': '∃', '\\angle': '∠',
             '\\hbar': 'ħ', '\\prime': '′', '\\leftarrow': '←', '\\rightarrow': '→', '\\to': '→', '\\uparrow': '↑',
             '\\downarrow': '↓', '\\leftrightarrow': '↔', '\\Leftarrow': '⇐', '\\Rightarrow': '⇒',
             '\\implies': '⇒', '\\Uparrow': '⇑', '\\Downarrow': '⇓', '\\Leftrightarrow': '⇔'}
SYMBOLS = {'\\langle': '⟨', '\\rangle': '⟩', '\\ldots': '…', '\\cdots': '⋯', '\\ddots': '⋱', '\\vdots': '⋮',
           '\\quad': ' ', '\\qquad': '  '}
SYMBOL_MAP = {**GREEK_LETTERS, **OPERATORS, **SYMBOLS}

# Large operators get their own n-ary layout instead of a plain glyph run.
NARY_OPERATORS = {'\\sum': '∑', '\\int': '∫', '\\prod': '∏', '\\oint': '∮', '\\iint': '∬', '\\iiint': '∭',
                  '\\coprod': '∐', '\\bigcup': '⋃', '\\bigcap': '⋂'}
INTEGRAL_OPERATORS = {'\\int', '\\oint', '\\iint', '\\iiint'}

KNOWN_FUNCTIONS = {'\\sin', '\\cos', '\\tan', '\\csc', '\\sec', '\\cot', '\\sinh', '\\cosh', '\\tanh', '\\coth',
                   '\\arcsin', '\\arccos', '\\arctan', '\\log', '\\ln', '\\exp', '\\det', '\\dim', '\\min', '\\max',
                   '\\sup', '\\inf', '\\lim'}

# Operator values that end the body of a large operator.
BOUNDARY_VALUES = {'+', '-', '=', '\\neq', '\\ne', '\\le', '\\leq', '\\ge', '\\geq', '\\approx', '\\equiv',
                   '\\pm', '\\mp'}
