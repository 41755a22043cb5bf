"""Tests for diagnostic messages and categories."""

from psl import (
    DOSNewlineError,
    InvalidEncodingError,
    MissingEntityEmail,
    MissingEntityName,
    MoveSuffixBlock,
    PSLError,
    Source,
    Suffixes,
    SuffixBlocksInWrongPlace,
    UnknownSectionMarker,
    UTF8BOMError,
    parse,
)


class TestCategories:
    def test_all_errors_are_psl_errors(self):
        file = parse(b"\xef\xbb\xbf// ===BEGIN A===\n!x.com\n// ===END B===")
        assert file.errors
        assert all(isinstance(e, PSLError) for e in file.errors)
        assert [e.category for e in file.errors] == [
            "encoding",
            "structural",
            "semantic",
            "structural",
        ]

    def test_ordering_category(self):
        assert SuffixBlocksInWrongPlace([MoveSuffixBlock("A")]).category == "ordering"


class TestMessages:
    def test_encoding(self):
        assert str(InvalidEncodingError("UTF-16LE")) == (
            "file uses invalid character encoding UTF-16LE"
        )
        assert "BOM" in str(UTF8BOMError())

    def test_line_error_location(self):
        err = DOSNewlineError(Source(("foo\r",), 6))
        assert str(err).startswith("line 7 has a DOS line ending")

    def test_unknown_marker_quotes_line(self):
        err = UnknownSectionMarker(Source(("// ===FOO===",), 0))
        assert str(err) == "unknown kind of section marker '// ===FOO===' at line 1"

    def test_missing_entity(self):
        suffixes = Suffixes(source=Source(("// header", "example.com"), 9))
        assert str(MissingEntityName(suffixes)) == (
            "could not find entity name for 0 unowned suffixes at lines 10-11"
        )
        suffixes.entity = "Example Co"
        assert "'Example Co'" in str(MissingEntityEmail(suffixes))


class TestSuffixBlocksInWrongPlace:
    def test_move_to_start(self):
        err = SuffixBlocksInWrongPlace([MoveSuffixBlock("Zeta")])
        assert str(err) == (
            "suffix block 'Zeta' is in the wrong place, "
            "should be at the start of the private section"
        )

    def test_move_after(self):
        err = SuffixBlocksInWrongPlace([MoveSuffixBlock("Zeta", insert_after="Alpha")])
        assert str(err) == (
            "suffix block 'Zeta' is in the wrong place, "
            "it should go immediately after block 'Alpha'"
        )

    def test_multiple_moves(self):
        script = [MoveSuffixBlock("Zeta", "Alpha"), MoveSuffixBlock("Aardvark")]
        err = SuffixBlocksInWrongPlace(script)
        assert err.edit_script == script
        assert str(err) == (
            "2 suffix blocks are in the wrong place, make these changes to fix:\n"
            "\tmove block: Zeta\n"
            "\t     after: Alpha\n"
            "\tmove block: Aardvark\n"
            "\t        to: start of private section\n"
        )
