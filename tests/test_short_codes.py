"""
Tests for short code generation and validation.
"""

import pytest

from shortlink.core.exceptions import InvalidShortCodeError
from shortlink.core.validators import (
    is_valid_short_code,
    sanitize_short_code,
    validate_short_code,
)
from shortlink.services.code_generator import SHORT_CODE_ALPHABET, generate_short_code


class TestCodeGenerator:
    """Test random short code generation."""

    def test_alphabet_is_base62(self):
        """The alphabet holds exactly the 62 ASCII letters and digits."""
        assert len(SHORT_CODE_ALPHABET) == 62
        assert len(set(SHORT_CODE_ALPHABET)) == 62
        assert SHORT_CODE_ALPHABET.isalnum()
        assert SHORT_CODE_ALPHABET.isascii()

    def test_default_length_is_six(self):
        for _ in range(200):
            code = generate_short_code()
            assert len(code) == 6
            assert all(char in SHORT_CODE_ALPHABET for char in code)

    @pytest.mark.parametrize("length", [6, 7, 8])
    def test_custom_length(self, length):
        assert len(generate_short_code(length)) == length

    def test_generated_codes_pass_custom_code_validation(self):
        """Generated codes never need a different rule than custom ones."""
        for _ in range(200):
            assert is_valid_short_code(generate_short_code())

    def test_codes_are_not_repeated(self):
        """1,000 draws from 62^6 codes should not produce a duplicate."""
        codes = {generate_short_code() for _ in range(1000)}
        assert len(codes) == 1000

    def test_uses_whole_alphabet(self):
        """Uppercase, lowercase and digits all appear over many draws."""
        seen = set(''.join(generate_short_code() for _ in range(2000)))
        assert any(char.isupper() for char in seen)
        assert any(char.islower() for char in seen)
        assert any(char.isdigit() for char in seen)


class TestShortCodeValidation:
    """Test the custom short code format rule."""

    @pytest.mark.parametrize("code", ["abc123", "ABCdef", "000000", "abcd1234", "Zz9Zz9z"])
    def test_valid_codes(self, code):
        assert is_valid_short_code(code)
        validate_short_code(code)

    @pytest.mark.parametrize(
        "code",
        [
            "ab",          # too short
            "abcde",       # one short of the minimum
            "abc!23",      # bad character
            "123456789",   # too long (9 chars)
            "abc 123",     # whitespace inside
            "abc-123",
            "abc_123",
            "abc123\n",    # trailing newline
            "ábc123",      # non-ASCII letter
            "",
        ]
    )
    def test_invalid_codes(self, code):
        assert not is_valid_short_code(code)
        with pytest.raises(InvalidShortCodeError) as exc_info:
            validate_short_code(code)
        assert exc_info.value.short_code == code

    def test_non_string_is_invalid(self):
        assert not is_valid_short_code(None)
        assert not is_valid_short_code(123456)

    def test_error_message_is_human_readable(self):
        with pytest.raises(InvalidShortCodeError, match="6-8 alphanumeric"):
            validate_short_code("ab")


class TestSanitizeShortCode:
    """Test the path parameter guard."""

    def test_strips_whitespace(self):
        assert sanitize_short_code("  abc123 ") == "abc123"

    @pytest.mark.parametrize("code", ["", None, "../etc", "abc.123", "a" * 21, "abc%20"])
    def test_rejects_non_codes(self, code):
        assert sanitize_short_code(code) is None

    def test_accepts_codes_of_any_plausible_length(self):
        assert sanitize_short_code("ab") == "ab"
        assert sanitize_short_code("a" * 20) == "a" * 20
