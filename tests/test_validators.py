"""Tests for the pure validation, normalization and code generation helpers."""

import pytest

from shortlinks.core.codegen import URL_SAFE_ALPHABET, generate_short_code
from shortlinks.core.validators import is_valid_code_syntax, is_valid_url, normalize_code


class TestURLValidation:
    """Test URL validation function."""

    @pytest.mark.parametrize("url", [
        "http://example.com",
        "https://example.com",
        "https://www.example.com/path/to/page",
        "http://subdomain.example.com:8080/path?query=value",
        "HTTPS://EXAMPLE.COM/Upper",
        "http://localhost:3000/",
        "http://127.0.0.1/x",
    ])
    def test_valid_urls(self, url):
        assert is_valid_url(url), f"Should be valid: {url}"

    @pytest.mark.parametrize("url", [
        "not-a-url",
        "ftp://example.com",
        "example.com",
        "",
        "http://",
        "javascript:alert(1)",
        "mailto:someone@example.com",
        "http://exa mple.com",
        " https://example.com",
        "http://example.com:99999/",
        None,
        42,
        ["https://example.com"],
    ])
    def test_invalid_urls(self, url):
        assert not is_valid_url(url), f"Should be invalid: {url!r}"


class TestNormalizeCode:
    def test_trims_and_lowercases(self):
        assert normalize_code("  MyCode ") == "mycode"

    def test_empty_inputs(self):
        assert normalize_code("") == ""
        assert normalize_code("   ") == ""
        assert normalize_code(None) == ""


class TestCodeSyntax:
    def test_too_short_rejected(self):
        assert not is_valid_code_syntax("ab")

    def test_allowed_charset_accepted(self):
        assert is_valid_code_syntax("valid-code_1")

    def test_space_and_punctuation_rejected(self):
        assert not is_valid_code_syntax("bad code!")

    def test_length_bounds(self):
        assert is_valid_code_syntax("abcd")
        assert is_valid_code_syntax("a" * 32)
        assert not is_valid_code_syntax("abc")
        assert not is_valid_code_syntax("a" * 33)

    def test_trailing_newline_rejected(self):
        assert not is_valid_code_syntax("abcd\n")

    def test_non_string_rejected(self):
        assert not is_valid_code_syntax(None)
        assert not is_valid_code_syntax(12345)


class TestCodeGenerator:
    def test_fixed_length_lowercase(self):
        for _ in range(50):
            code = generate_short_code()
            assert len(code) == 7
            assert code == code.lower()
            assert all(ch in URL_SAFE_ALPHABET for ch in code)
            assert is_valid_code_syntax(code)

    def test_custom_length(self):
        assert len(generate_short_code(10)) == 10

    def test_rejects_non_positive_length(self):
        with pytest.raises(ValueError):
            generate_short_code(0)

    def test_codes_vary(self):
        codes = {generate_short_code() for _ in range(200)}
        assert len(codes) > 190
