"""
Escaping and Tokenizer Tests

Verifies that the delimiter can appear inside any field without
changing how the wire text splits.
"""

from hypothesis import given, strategies as st

from activity_dna.codec.escaping import (
    escape_field, unescape_field, split_fields, tokenize, join_fields
)


# =============================================================================
# ESCAPE TOKENS
# =============================================================================

class TestEscapeField:

    def test_plain_text_unchanged(self):
        assert escape_field("page_view") == "page_view"

    def test_single_inner_colon_is_literal(self):
        assert escape_field("12:30") == "12:30"

    def test_delimiter_escaped(self):
        assert escape_field("a::b") == r"a\:b"

    def test_trailing_colon_escaped(self):
        assert escape_field("a:") == r"a\."

    def test_colon_pairs_consumed_left_to_right(self):
        assert escape_field(":::") == r"\:\."

    def test_backslash_doubled(self):
        assert escape_field("a\\b") == r"a\\b"

    def test_unknown_escape_kept_verbatim(self):
        assert unescape_field(r"a\xb") == r"a\xb"


# =============================================================================
# TOKENIZER
# =============================================================================

class TestTokenizer:

    def test_escape_token_is_atomic(self):
        """An escaped delimiter directly before a real one splits once."""
        assert split_fields(r"a\:::b") == [r"a\:", "b"]
        assert tokenize(r"a\:::b") == ["a::", "b"]

    def test_middle_empty_field_is_kept(self):
        assert tokenize("a::::v") == ["a", "", "v"]

    def test_join_drops_trailing_empty_fields(self):
        assert join_fields(["a", "1", "v", "", ""]) == "a::1::v"

    def test_join_keeps_middle_empty_fields(self):
        assert join_fields(["a", "1", "", "", "1.1"]) == "a::1::::::1.1"

    def test_leading_colon_after_delimiter(self):
        assert tokenize(join_fields(["x", ":a", "v"])) == ["x", ":a", "v"]


# =============================================================================
# PROPERTY TESTS
# =============================================================================

@given(st.text())
def test_unescape_reverses_escape(text):
    assert unescape_field(escape_field(text)) == text


@given(st.lists(st.text(), min_size=1, max_size=6).filter(lambda f: f[-1] != ""))
def test_fields_survive_join_and_split(fields):
    """Any field content, delimiters and backslashes included, splits back out."""
    assert tokenize(join_fields(fields)) == fields


@given(st.text(alphabet=":\\ab", max_size=12))
def test_escaped_field_never_contains_raw_delimiter_boundary(text):
    assert split_fields(escape_field(text)) == [escape_field(text)]
