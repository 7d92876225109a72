"""
Tests for math notation conversion.
"""

import pytest

from RichContent.symbols import (
    FRACTION_SLASH,
    QUICK_INSERTS,
    RULES,
    NotationKind,
    convert,
    to_subscript,
    to_superscript,
)


class TestConcreteConversions:
    """Reference cases every author relies on."""

    def test_greek_letter(self):
        assert convert("\\pi") == "π"

    def test_superscript(self):
        assert convert("x^{2}") == "x²"

    def test_known_fraction_uses_precomposed_glyph(self):
        assert convert("\\frac{1}{2}") == "½"

    def test_square_root_of_single_symbol(self):
        assert convert("\\sqrt{x}") == "√x"

    def test_sum_with_bounds(self):
        assert convert("\\sum_{i=1}^{n}") == "Σ" + to_subscript("i=1") + to_superscript("n")
        assert convert("\\sum_{i=1}^{n}") == "Σᵢ₌₁ⁿ"

    def test_empty_notation(self):
        assert convert("") == ""


class TestFractions:

    @pytest.mark.parametrize(
        "notation, expected",
        [
            ("\\frac{3}{4}", "¾"),
            ("\\frac{1}{10}", "⅒"),
            ("\\frac{7}{8}", "⅞"),
        ],
    )
    def test_glyph_table(self, notation, expected):
        assert convert(notation) == expected

    def test_single_alphanumerics_use_fraction_slash(self):
        assert convert("\\frac{a}{b}") == f"a{FRACTION_SLASH}b"
        assert convert("\\frac{5}{7}") == f"5{FRACTION_SLASH}7"

    def test_compound_arguments_are_parenthesized(self):
        assert convert("\\frac{x+1}{2y}") == "(x+1)/(2y)"

    def test_fraction_inside_text(self):
        assert convert("half is \\frac{1}{2} here") == "half is ½ here"


class TestRangeOperators:

    def test_integral_with_bounds(self):
        assert convert("\\int_{0}^{1}") == "∫₀¹"

    def test_product_lower_bound_only(self):
        assert convert("\\prod_{k}") == "Πₖ"

    def test_bare_operator(self):
        assert convert("\\sum x") == "Σ x"

    def test_bounds_convert_bare_symbols(self):
        assert convert("\\int_{0}^{\\infty}") == "∫₀∞"

    def test_limit_with_condition(self):
        assert convert("\\lim_{x \\to 0}") == "lim(x → 0)"

    def test_bare_limit(self):
        assert convert("\\lim f(x)") == "lim f(x)"


class TestSquareRoot:

    def test_compound_argument_is_parenthesized(self):
        assert convert("\\sqrt{x+1}") == "√(x+1)"

    def test_empty_braces_stay_literal(self):
        assert convert("\\sqrt{}") == "\\sqrt{}"


class TestBareSymbols:

    @pytest.mark.parametrize(
        "notation, expected",
        [
            ("\\alpha + \\beta", "α + β"),
            ("a \\leq b", "a ≤ b"),
            ("a \\le b", "a ≤ b"),
            ("\\pm 1", "± 1"),
            ("x \\in A", "x ∈ A"),
            ("\\Delta x", "Δ x"),
        ],
    )
    def test_symbol_table(self, notation, expected):
        assert convert(notation) == expected

    def test_longest_token_wins(self):
        assert convert("\\infty") == "∞"
        assert convert("\\neq") == "≠"

    def test_token_followed_by_letters_is_not_a_match(self):
        assert convert("\\pizza") == "\\pizza"

    def test_unknown_command_passes_through(self):
        assert convert("\\unknown{x}") == "\\unknown{x}"


class TestScripts:

    def test_subscript(self):
        assert convert("x_{1}") == "x₁"

    def test_unmapped_characters_pass_through(self):
        assert convert("x^{q}") == "xq"
        assert to_subscript("z") == "z"

    def test_symbol_inside_exponent(self):
        assert convert("e^{\\pi}") == "eπ"

    def test_unterminated_braces_stay_literal(self):
        assert convert("x^{2") == "x^{2"
        assert convert("\\frac{1}{2") == "\\frac{1}{2"

    def test_nested_braces_are_not_parsed(self):
        assert convert("x^{{2}}") == "x^{{2}}"


class TestIdempotence:

    @pytest.mark.parametrize(
        "notation",
        [
            "\\frac{1}{2} + x^{2}",
            "\\sum_{i=1}^{n} a_{i}",
            "\\sqrt{x+1} \\leq \\pi",
            "plain text only",
            "\\lim_{x \\to 0} f(x)",
        ],
    )
    def test_converting_output_again_is_a_no_op(self, notation):
        once = convert(notation)
        assert convert(once) == once


class TestPipeline:

    def test_rule_order(self):
        kinds = [rule.kind for rule in RULES]
        assert kinds[0] is NotationKind.FRACTION
        assert kinds[-1] is NotationKind.SCRIPT
        assert kinds.index(NotationKind.SYMBOL) < kinds.index(NotationKind.SCRIPT)

    def test_quick_inserts_all_convert(self):
        for label, snippet in QUICK_INSERTS:
            assert isinstance(convert(snippet), str), label

    def test_quick_insert_sum_matches_reference(self):
        snippets = dict(QUICK_INSERTS)
        assert convert(snippets["sum"]) == "Σᵢ₌₁ⁿ"
