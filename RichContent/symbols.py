"""
Math notation to Unicode symbol conversion.

Authors type a small LaTeX subset (``x^{2}``, ``\\frac{1}{2}``, ``\\sqrt{x}``,
``\\sum_{i=1}^{n}``, ``\\pi`` ...) and the engine turns it into plain Unicode
text, so stored answers never need a typesetting runtime to display.

Conversion is an ordered pipeline of rewrite rules. Each rule rescans the
output of the previous one, and the order is load-bearing: fractions and range
operators consume their braces before the generic ``^{}``/``_{}`` rule would
otherwise claim them, and bare symbols are replaced before scripts so a token
like ``\\infty`` inside an exponent still converts.

Anything the rules do not recognize is left exactly as typed.
"""
from __future__ import annotations

import dataclasses
import enum
import re
from typing import Callable, Dict, List, Tuple

SUPERSCRIPTS: Dict[str, str] = {
  '0': '⁰', '1': '¹', '2': '²', '3': '³', '4': '⁴',
  '5': '⁵', '6': '⁶', '7': '⁷', '8': '⁸', '9': '⁹',
  '+': '⁺', '-': '⁻', '=': '⁼', '(': '⁽', ')': '⁾',
  'n': 'ⁿ', 'i': 'ⁱ', 'x': 'ˣ', 'y': 'ʸ', 'a': 'ᵃ', 'b': 'ᵇ',
}

SUBSCRIPTS: Dict[str, str] = {
  '0': '₀', '1': '₁', '2': '₂', '3': '₃', '4': '₄',
  '5': '₅', '6': '₆', '7': '₇', '8': '₈', '9': '₉',
  '+': '₊', '-': '₋', '=': '₌', '(': '₍', ')': '₎',
  'a': 'ₐ', 'e': 'ₑ', 'i': 'ᵢ', 'o': 'ₒ', 'u': 'ᵤ',
  'x': 'ₓ', 'n': 'ₙ', 'm': 'ₘ', 'k': 'ₖ',
}

UNICODE_FRACTIONS: Dict[Tuple[str, str], str] = {
  ('1', '2'): '½', ('1', '3'): '⅓', ('2', '3'): '⅔',
  ('1', '4'): '¼', ('3', '4'): '¾',
  ('1', '5'): '⅕', ('2', '5'): '⅖', ('3', '5'): '⅗', ('4', '5'): '⅘',
  ('1', '6'): '⅙', ('5', '6'): '⅚',
  ('1', '7'): '⅐',
  ('1', '8'): '⅛', ('3', '8'): '⅜', ('5', '8'): '⅝', ('7', '8'): '⅞',
  ('1', '9'): '⅑', ('1', '10'): '⅒',
}

FRACTION_SLASH = '⁄'

RANGE_OPERATORS: Dict[str, str] = {
  'sum': 'Σ',
  'int': '∫',
  'prod': 'Π',
}

UNARY_OPERATORS: Dict[str, str] = {
  'sqrt': '√',
}

SYMBOLS: Dict[str, str] = {
  # operators
  r'\pm': '±',
  r'\mp': '∓',
  r'\times': '×',
  r'\div': '÷',
  r'\cdot': '·',
  r'\circ': '∘',
  # relations
  r'\leq': '≤',
  r'\le': '≤',
  r'\geq': '≥',
  r'\ge': '≥',
  r'\neq': '≠',
  r'\ne': '≠',
  r'\approx': '≈',
  r'\equiv': '≡',
  r'\sim': '∼',
  r'\propto': '∝',
  r'\in': '∈',
  r'\notin': '∉',
  r'\subset': '⊂',
  r'\subseteq': '⊆',
  r'\cup': '∪',
  r'\cap': '∩',
  r'\emptyset': '∅',
  r'\forall': '∀',
  r'\exists': '∃',
  r'\perp': '⊥',
  r'\parallel': '∥',
  r'\angle': '∠',
  r'\therefore': '∴',
  # arrows
  r'\to': '→',
  r'\rightarrow': '→',
  r'\leftarrow': '←',
  r'\leftrightarrow': '↔',
  r'\Rightarrow': '⇒',
  r'\Leftarrow': '⇐',
  r'\Leftrightarrow': '⇔',
  # greek
  r'\alpha': 'α',
  r'\beta': 'β',
  r'\gamma': 'γ',
  r'\delta': 'δ',
  r'\epsilon': 'ε',
  r'\zeta': 'ζ',
  r'\eta': 'η',
  r'\theta': 'θ',
  r'\kappa': 'κ',
  r'\lambda': 'λ',
  r'\mu': 'μ',
  r'\nu': 'ν',
  r'\xi': 'ξ',
  r'\pi': 'π',
  r'\rho': 'ρ',
  r'\sigma': 'σ',
  r'\tau': 'τ',
  r'\phi': 'φ',
  r'\chi': 'χ',
  r'\psi': 'ψ',
  r'\omega': 'ω',
  r'\Gamma': 'Γ',
  r'\Delta': 'Δ',
  r'\Theta': 'Θ',
  r'\Lambda': 'Λ',
  r'\Sigma': 'Σ',
  r'\Phi': 'Φ',
  r'\Omega': 'Ω',
  # misc
  r'\infty': '∞',
  r'\partial': '∂',
  r'\nabla': '∇',
  r'\degree': '°',
}

# Snippets offered by the math dialog's quick-insert palette, in display order.
QUICK_INSERTS: List[Tuple[str, str]] = [
  ('x^n', '^{}'),
  ('x_n', '_{}'),
  ('fraction', r'\frac{}{}'),
  ('√', r'\sqrt{}'),
  ('±', r'\pm'),
  ('×', r'\times'),
  ('÷', r'\div'),
  ('≤', r'\leq'),
  ('π', r'\pi'),
  ('α', r'\alpha'),
  ('β', r'\beta'),
  ('∞', r'\infty'),
  ('integral', r'\int_{0}^{1}'),
  ('limit', r'\lim_{x \to 0}'),
  ('sum', r'\sum_{i=1}^{n}'),
]


def to_superscript(text: str) -> str:
  return "".join(SUPERSCRIPTS.get(char, char) for char in text)


def to_subscript(text: str) -> str:
  return "".join(SUBSCRIPTS.get(char, char) for char in text)


def _is_simple(argument: str) -> bool:
  return re.fullmatch(r"[0-9A-Za-z]", argument) is not None


class NotationKind(enum.Enum):
  FRACTION = enum.auto()
  RANGE = enum.auto()
  UNARY = enum.auto()
  SYMBOL = enum.auto()
  SCRIPT = enum.auto()


@dataclasses.dataclass(frozen=True)
class RewriteRule:
  kind: NotationKind
  pattern: re.Pattern
  rewrite: Callable[[re.Match], str]

  def apply(self, text: str) -> str:
    return self.pattern.sub(self.rewrite, text)


# Longest token first so "\leq" is never read as "\le" followed by "q", and a
# token never matches when more letters follow it ("\in" inside "\infty").
_SYMBOL_PATTERN = re.compile(
  "(" + "|".join(re.escape(token) for token in sorted(SYMBOLS, key=len, reverse=True)) + ")(?![A-Za-z])"
)


def _replace_symbols(text: str) -> str:
  return _SYMBOL_PATTERN.sub(lambda match: SYMBOLS[match.group(1)], text)


def _rewrite_fraction(match: re.Match) -> str:
  numerator, denominator = match.group(1), match.group(2)
  glyph = UNICODE_FRACTIONS.get((numerator, denominator))
  if glyph is not None:
    return glyph
  if _is_simple(numerator) and _is_simple(denominator):
    return f"{numerator}{FRACTION_SLASH}{denominator}"
  return f"({numerator})/({denominator})"


def _rewrite_range(match: re.Match) -> str:
  glyph = RANGE_OPERATORS[match.group("name")]
  lower = match.group("lower")
  upper = match.group("upper")
  rendered = glyph
  if lower is not None:
    rendered += to_subscript(_replace_symbols(lower))
  if upper is not None:
    rendered += to_superscript(_replace_symbols(upper))
  return rendered


def _rewrite_limit(match: re.Match) -> str:
  condition = match.group("condition")
  if condition is None:
    return "lim"
  return f"lim({_replace_symbols(condition)})"


def _rewrite_unary(match: re.Match) -> str:
  glyph = UNARY_OPERATORS[match.group("name")]
  argument = match.group("argument")
  if _is_simple(argument):
    return f"{glyph}{argument}"
  return f"{glyph}({argument})"


RULES: List[RewriteRule] = [
  RewriteRule(
    NotationKind.FRACTION,
    re.compile(r"\\frac\{([^{}]+)\}\{([^{}]+)\}"),
    _rewrite_fraction,
  ),
  RewriteRule(
    NotationKind.RANGE,
    re.compile(
      r"\\(?P<name>" + "|".join(RANGE_OPERATORS) + r")(?![A-Za-z])"
      r"(?:_\{(?P<lower>[^{}]+)\})?(?:\^\{(?P<upper>[^{}]+)\})?"
    ),
    _rewrite_range,
  ),
  RewriteRule(
    NotationKind.RANGE,
    re.compile(r"\\lim(?![A-Za-z])(?:_\{(?P<condition>[^{}]+)\})?"),
    _rewrite_limit,
  ),
  RewriteRule(
    NotationKind.UNARY,
    re.compile(r"\\(?P<name>" + "|".join(UNARY_OPERATORS) + r")\{(?P<argument>[^{}]+)\}"),
    _rewrite_unary,
  ),
  RewriteRule(
    NotationKind.SYMBOL,
    _SYMBOL_PATTERN,
    lambda match: SYMBOLS[match.group(1)],
  ),
  RewriteRule(
    NotationKind.SCRIPT,
    re.compile(r"\^\{([^{}]+)\}"),
    lambda match: to_superscript(match.group(1)),
  ),
  RewriteRule(
    NotationKind.SCRIPT,
    re.compile(r"_\{([^{}]+)\}"),
    lambda match: to_subscript(match.group(1)),
  ),
]


def convert(notation: str) -> str:
  """
  Convert constrained math notation into Unicode symbolic text.

  Never raises: unknown commands, unmapped script characters and unterminated
  braces all come through unchanged.

  Example:
      >>> convert(r"\\frac{1}{2} + x^{2}")
      '½ + x²'
  """
  if not notation:
    return ""
  result = notation
  for rule in RULES:
    result = rule.apply(result)
  return result
