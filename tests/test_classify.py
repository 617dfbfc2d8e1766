"""Tests for the name encoding classifier."""

import pytest

from fs2utf8.classify import classify, is_ascii, is_iso8859_1, is_utf8
from fs2utf8.model import Classification
from fs2utf8.transcode import Transcoder


class TestAscii:
    def test_printable_name(self):
        assert is_ascii(b"report-2024 (final).txt")

    def test_empty_name_is_ascii(self):
        assert is_ascii(b"")

    @pytest.mark.parametrize("name", [b"tab\there", b"del\x7f", b"caf\xe9", b"caf\xc3\xa9"])
    def test_rejects_controls_and_high_bytes(self, name):
        assert not is_ascii(name)


class TestIso8859_1:
    def test_latin1_name(self):
        assert is_iso8859_1(b"caf\xe9.txt")

    def test_accepts_upper_range(self):
        assert is_iso8859_1(bytes(range(0xA1, 0x100)))

    @pytest.mark.parametrize("byte", [0x01, 0x1F, 0x7F, 0x80, 0x90, 0x9F, 0xA0])
    def test_rejects_controls_and_nbsp(self, byte):
        assert not is_iso8859_1(b"x" + bytes([byte]) + b"y")


class TestUtf8:
    @pytest.mark.parametrize("text", ["café", "€uro", "日本語.txt", "smile-\U0001F600"])
    def test_valid_sequences(self, text):
        assert is_utf8(text.encode("utf-8"))

    @pytest.mark.parametrize("name", [b"\xc0\x80", b"\xc1\xbf", b"ok\xf5\x80\x80\x80", b"\xff"])
    def test_rejects_illegal_bytes(self, name):
        assert not is_utf8(name)

    def test_rejects_lone_continuation(self):
        assert not is_utf8(b"a\x80b")

    def test_rejects_bad_continuation(self):
        assert not is_utf8(b"\xc3\x28")

    @pytest.mark.parametrize("name", [b"\xc3", b"ab\xe2\x82", b"\xf0\x9f\x98"])
    def test_rejects_truncated_sequence(self, name):
        assert not is_utf8(name)

    def test_rejects_control_bytes(self):
        assert not is_utf8(b"a\tb")

    @pytest.mark.parametrize("name", [
        b"\xf8\x88\x80\x80\x80",          # obsolete 5-byte form
        b"\xfc\x84\x80\x80\x80\x80",      # obsolete 6-byte form
    ])
    def test_rejects_legacy_long_forms(self, name):
        assert not is_utf8(name)

    def test_f4_lead_range_not_checked(self):
        """F4 90.. encodes past U+10FFFF; only lead bytes are range checked."""
        assert is_utf8(b"\xf4\x90\x80\x80")


class TestClassify:
    def test_priority_ascii_first(self):
        assert classify(b"plain.txt") is Classification.ASCII

    def test_utf8_before_latin1(self):
        # C3 A9 is also two valid Latin-1 glyphs
        assert is_iso8859_1(b"caf\xc3\xa9")
        assert classify(b"caf\xc3\xa9") is Classification.UTF8

    def test_latin1(self):
        assert classify(b"caf\xe9") is Classification.LATIN1

    def test_unclassified(self):
        assert classify(b"it\x90s") is Classification.UNCLASSIFIED

    def test_total_over_single_bytes(self):
        for b in range(256):
            assert isinstance(classify(bytes([b])), Classification)

    @pytest.mark.parametrize("name", [
        b"", b"abc", b"a\tb", b"caf\xe9", b"caf\xc3\xa9", b"\x90", b"\xa0", b"\xc0\xff", b"\xe2\x82",
    ])
    def test_first_matching_predicate_wins(self, name):
        checks = [
            (is_ascii, Classification.ASCII),
            (is_utf8, Classification.UTF8),
            (is_iso8859_1, Classification.LATIN1),
        ]
        expected = next((cls for check, cls in checks if check(name)), Classification.UNCLASSIFIED)
        assert classify(name) is expected


class TestLatin1RoundTrip:
    @pytest.mark.parametrize("name", [bytes(range(0xC0, 0x100)), b"\xc0\xe9\xff", b"\xd8\xf8"])
    def test_transcoded_name_classifies_as_utf8(self, name):
        assert classify(name) is Classification.LATIN1
        result = Transcoder().transcode(name)
        assert result.ok
        assert classify(result.data) is Classification.UTF8
