"""Tests for suffix parsing and wildcard exception validation."""

import pytest

from psl import (
    Comment,
    DNSLabels,
    DuplicateExceptionError,
    ExceptionAndWildcardSuffixError,
    ExceptionNotDirectlyFollowingBaseError,
    InvalidExceptionError,
    InvalidSource,
    Suffix,
    Suffixes,
    parse,
)


def icann(*lines: str) -> bytes:
    body = "\n".join(lines)
    return f"// ===BEGIN ICANN DOMAINS===\n{body}\n// ===END ICANN DOMAINS===".encode()


def suffix_block(file) -> Suffixes:
    """The single suffix block inside the single section."""
    section = file.blocks[0]
    assert len(section.children) == 1
    block = section.children[0]
    assert isinstance(block, Suffixes)
    return block


class TestDNSLabels:
    def test_from_domain_is_tld_first(self):
        assert DNSLabels.from_domain("foo.example.uk") == ["uk", "example", "foo"]

    def test_str(self):
        assert str(DNSLabels(["uk", "example", "foo"])) == "foo.example.uk"

    def test_direct_child(self):
        parent = DNSLabels.from_domain("example.uk")
        assert DNSLabels.from_domain("foo.example.uk").is_direct_child_of(parent)

    def test_parent_is_label_prefix(self):
        child = DNSLabels(["uk", "example", "foo"])
        assert child.is_direct_child_of(["uk", "example"])
        # Split order ("example", "uk") is not the stored order.
        assert not child.is_direct_child_of(["example", "uk"])

    @pytest.mark.parametrize(
        "child",
        ["example.uk", "uk", "bar.baz.example.uk", "foo.example.com", "foo.other.uk"],
    )
    def test_not_direct_child(self, child):
        parent = DNSLabels.from_domain("example.uk")
        assert not DNSLabels.from_domain(child).is_direct_child_of(parent)


class TestSuffix:
    def test_plain(self):
        block = suffix_block(parse(icann("co.uk")))
        suffix = block.children[0]
        assert isinstance(suffix, Suffix)
        assert suffix.labels == ["uk", "co"]
        assert not suffix.wildcard
        assert suffix.exceptions == []
        assert suffix.domain == "co.uk"

    def test_wildcard(self):
        suffix = suffix_block(parse(icann("*.ck"))).children[0]
        assert suffix.wildcard
        assert suffix.labels == ["ck"]

    def test_block_with_header_and_inline_comments(self):
        file = parse(icann("// uk : https://en.wikipedia.org/wiki/.uk", "co.uk", "// inline", "org.uk"))
        assert file.errors == []
        block = suffix_block(file)
        assert [type(b) for b in block.children] == [Comment, Suffix, Comment, Suffix]
        assert [e.domain for e in block.entries] == ["co.uk", "org.uk"]
        assert block.short_name() == "2 unowned suffixes"


class TestExceptions:
    def test_accepted(self):
        file = parse(icann("example.uk", "!foo.example.uk"))
        assert file.errors == []
        block = suffix_block(file)
        assert len(block.children) == 1
        suffix = block.children[0]
        assert suffix.labels == ["uk", "example"]
        assert suffix.exceptions == [["uk", "example", "foo"]]
        assert suffix.source.location_string() == "lines 2-3"

    def test_accepted_without_section(self):
        file = parse(b"example.uk\n!foo.example.uk")
        assert file.errors == []
        suffix = file.blocks[0].children[0]
        assert suffix.exceptions == [["uk", "example", "foo"]]

    def test_multiple_exceptions(self):
        file = parse(icann("*.kawasaki.jp", "!city.kawasaki.jp", "!www.kawasaki.jp"))
        assert file.errors == []
        suffix = suffix_block(file).children[0]
        assert [str(e) for e in suffix.exceptions] == ["city.kawasaki.jp", "www.kawasaki.jp"]
        assert suffix.source.num_lines == 3

    def test_no_base(self):
        file = parse(icann("!foo.example.uk"))
        assert [type(e) for e in file.errors] == [ExceptionNotDirectlyFollowingBaseError]
        assert [type(b) for b in suffix_block(file).children] == [InvalidSource]

    def test_after_comment(self):
        file = parse(icann("example.uk", "// comment", "!foo.example.uk"))
        assert [type(e) for e in file.errors] == [ExceptionNotDirectlyFollowingBaseError]
        suffix = suffix_block(file).children[0]
        assert suffix.exceptions == []

    def test_after_blank_line(self):
        file = parse(icann("example.uk", "", "!foo.example.uk"))
        assert [type(e) for e in file.errors] == [ExceptionNotDirectlyFollowingBaseError]

    def test_not_a_direct_child(self):
        file = parse(icann("example.uk", "!bar.baz.example.uk"))
        assert [type(e) for e in file.errors] == [InvalidExceptionError]
        err = file.errors[0]
        assert err.parent.domain == "example.uk"
        assert err.source.location_string() == "line 3"

    def test_duplicate(self):
        file = parse(icann("example.uk", "!a.example.uk", "!a.example.uk"))
        assert [type(e) for e in file.errors] == [DuplicateExceptionError]
        assert file.errors[0].source.location_string() == "line 4"
        block = suffix_block(file)
        assert [type(b) for b in block.children] == [Suffix, InvalidSource]
        assert block.children[0].exceptions == [["uk", "example", "a"]]

    def test_wildcard_exception(self):
        file = parse(icann("*.ck", "!*.www.ck"))
        assert [type(e) for e in file.errors] == [ExceptionAndWildcardSuffixError]

    def test_wildcard_checked_before_base(self):
        file = parse(icann("!*.www.ck"))
        assert [type(e) for e in file.errors] == [ExceptionAndWildcardSuffixError]

    def test_rejected_exception_breaks_chain(self):
        file = parse(icann("example.uk", "!bar.baz.example.uk", "!foo.example.uk"))
        assert [type(e) for e in file.errors] == [
            InvalidExceptionError,
            ExceptionNotDirectlyFollowingBaseError,
        ]
        block = suffix_block(file)
        assert [type(b) for b in block.children] == [Suffix, InvalidSource]
        assert block.children[1].source.location_string() == "lines 3-4"

    def test_lossless_with_exceptions(self):
        data = icann("example.uk", "!a.example.uk", "!a.example.uk", "!b.example.uk")
        file = parse(data)
        assert file.text() == data.decode()
