"""Validating parser for PSL files.

Grammar:
    toplevel  = (blank | comment | section | suffixes | invalid)*
    section   = "// ===BEGIN <NAME>===" body "// ===END <NAME>==="
    body      = (blank | group | suffixes | invalid)*
    group     = GROUP_START group_body GROUP_END
    group_body = (blank | suffixes | invalid)*
    suffixes  = (comment | suffix | invalid)*     ; run of non-blank lines
    suffix    = ["*."] LABEL ("." LABEL)* ("!" LABEL ("." LABEL)*)*

Each rule consumes a prefix of the remaining input: zero lines, the next
few lines, or everything left, but never lines out of order.

The parser never gives up. Problems are recorded as diagnostics and the
offending lines are kept as InvalidSource blocks, so the result always
covers the whole input. See https://github.com/publicsuffix/list/wiki/Format
for the format and https://github.com/publicsuffix/list/wiki/Guidelines
for the submission rules being checked.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable

from . import ast
from .config import DEFAULT_CONFIG, GroupMarker, ParserConfig
from .encoding import normalize
from .errors import (
    DuplicateExceptionError,
    ExceptionAndWildcardSuffixError,
    ExceptionNotDirectlyFollowingBaseError,
    InvalidExceptionError,
    InvalidLineError,
    MismatchedGroupError,
    MismatchedSectionError,
    NestedGroupError,
    NestedSectionError,
    PSLError,
    UnclosedGroupError,
    UnclosedSectionError,
    UnknownSectionMarker,
    UnstartedGroupError,
    UnstartedSectionError,
    UnterminatedSectionMarker,
)
from .source import Source

logger = logging.getLogger(__name__)

COMMENT_PREFIX = "// "
SECTION_MARKER_PREFIX = "// ==="
SECTION_MARKER_SUFFIX = "==="
SECTION_BEGIN = "BEGIN"
SECTION_END = "END"

ExemptionFilter = Callable[[PSLError], bool]


@dataclass
class SectionMarker:
    """The parts of a "// ===<KIND> <NAME>===" line."""

    kind: str
    name: str
    missing_terminator: bool

    @property
    def valid(self) -> bool:
        return bool(self.name) and self.kind in (SECTION_BEGIN, SECTION_END)


def is_blank(line: str) -> bool:
    return line == ""


def is_section_marker(line: str) -> bool:
    return line.startswith(SECTION_MARKER_PREFIX)


def is_suffix_text(line: str) -> bool:
    """Whether line could be a suffix rule (labels are not validated)."""
    return bool(line) and not line.startswith("/") and not any(c.isspace() for c in line)


def is_wildcard(domain: str) -> bool:
    return domain == "*" or domain.startswith("*.")


def parse_section_marker(line: str) -> SectionMarker:
    marker = line.removeprefix(SECTION_MARKER_PREFIX)
    missing_terminator = not marker.endswith(SECTION_MARKER_SUFFIX)
    if not missing_terminator:
        marker = marker[: -len(SECTION_MARKER_SUFFIX)]

    kind, sep, name = marker.partition(" ")
    if not sep:
        return SectionMarker("", "", missing_terminator)
    return SectionMarker(kind, name, missing_terminator)


@dataclass
class _Frame:
    """Remaining input and output blocks of one construct being parsed."""

    source: Source
    blocks: list = field(default_factory=list)


class Parser:
    """Recursive descent parser over an explicit stack of frames.

    Entering a section, group or suffix block pushes a frame holding just
    that construct's lines. Popping it returns the children parsed so far,
    which become the construct's blocks.
    """

    def __init__(
        self,
        source: Source,
        config: ParserConfig | None = None,
        is_exempt: ExemptionFilter | None = None,
    ):
        self.config = config or DEFAULT_CONFIG
        self.is_exempt = is_exempt
        self.errors: list[PSLError] = []
        self.warnings: list[PSLError] = []
        self._frames: list[_Frame] = [_Frame(source.copy())]

    # -- frame and output helpers ------------------------------------------

    @property
    def src(self) -> Source:
        """The unparsed input of the current frame."""
        return self._frames[-1].source

    def _peek(self) -> str:
        return self.src.lines[0]

    def _push(self, source: Source) -> None:
        self._frames.append(_Frame(source.copy()))

    def _pop(self) -> list[ast.Block]:
        frame = self._frames.pop()
        if not frame.source.empty():
            raise RuntimeError(f"frame popped with unparsed input at {frame.source.location_string()}")
        return frame.blocks

    def add_block(self, block: ast.Block) -> None:
        self._frames[-1].blocks.append(block)

    def last_block(self) -> ast.Block | None:
        blocks = self._frames[-1].blocks
        return blocks[-1] if blocks else None

    def add_error(self, err: PSLError) -> None:
        """Record err, as a warning if it matches a legacy exemption."""
        if self.is_exempt is not None and self.is_exempt(err):
            self.warnings.append(err)
        else:
            self.errors.append(err)

    # -- line classification -----------------------------------------------

    def is_group_marker(self, line: str) -> bool:
        return self.config.is_group_marker(line)

    def is_comment(self, line: str) -> bool:
        return (
            line.startswith(COMMENT_PREFIX)
            and not is_section_marker(line)
            and not self.is_group_marker(line)
        )

    def is_block_boundary(self, line: str) -> bool:
        return is_blank(line) or is_section_marker(line) or self.is_group_marker(line)

    # -- grammar rules -----------------------------------------------------

    def parse(self) -> ast.File:
        """Consume all the input and return the parsed File."""
        self.parse_top_level()
        blocks = self._pop()
        logger.debug(
            "parsed %d top-level blocks, %d errors, %d warnings",
            len(blocks),
            len(self.errors),
            len(self.warnings),
        )
        return ast.File(blocks=blocks, errors=self.errors, warnings=self.warnings)

    def parse_top_level(self) -> None:
        while self.parse_blank():
            line = self._peek()
            if is_section_marker(line):
                self.parse_section()
            elif group := self.config.group_ending_with(line):
                self.add_error(UnstartedGroupError(self.src.first(), group.name))
                self.parse_invalid()
            elif self.config.group_starting_with(line):
                self.parse_invalid_line("group started outside of a section")
            elif self._run_has_suffix():
                # Suffixes outside any section still get their rules checked.
                self.parse_suffix_block()
            elif self.is_comment(line):
                self.parse_comment()
            else:
                self.parse_invalid_line("not a comment or a suffix")

    def parse_blank(self) -> bool:
        """Consume blank lines, if any, and report whether input remains."""
        src = self.src.take_while(is_blank)
        if not src.empty():
            self.add_block(ast.BlankLines(source=src))
        return not self.src.empty()

    def _run_has_suffix(self) -> bool:
        """Whether the next run of non-blank lines holds any suffix text."""
        for line in self.src.lines:
            if self.is_block_boundary(line):
                return False
            if not self.is_comment(line) and is_suffix_text(line):
                return True
        return False

    def parse_comment(self) -> None:
        src = self.src.take_while(self.is_comment)
        if src.empty():
            raise RuntimeError("parse_comment called but no comment found")
        self.add_block(ast.Comment(source=src))

    def parse_invalid(self) -> None:
        """Consume one line as invalid, merging it into a preceding invalid block."""
        src = self.src.take_one()
        prev = self.last_block()
        if isinstance(prev, ast.InvalidSource):
            prev.source = prev.source.append(src)
        else:
            self.add_block(ast.InvalidSource(source=src))

    def parse_invalid_line(self, reason: str) -> None:
        self.add_error(InvalidLineError(self.src.first(), reason))
        self.parse_invalid()

    def parse_section(self) -> None:
        """Parse a section, e.g. ===BEGIN ICANN DOMAINS=== .. ===END ICANN DOMAINS===."""
        start = self.src.first()
        marker = parse_section_marker(start.text)

        # Only report the most severe problem with a start marker.
        if not marker.valid:
            self.add_error(UnknownSectionMarker(start))
        elif marker.kind == SECTION_END:
            self.add_error(UnstartedSectionError(start, marker.name))
        elif marker.missing_terminator:
            self.add_error(UnterminatedSectionMarker(start))
        else:
            self._parse_section_contents(marker.name)
            return
        self.parse_invalid()

    def _parse_section_contents(self, name: str) -> None:
        begin = self.src.take_one()
        rest, closed = self.src.take_until(lambda line: self._is_section_end(line, name))

        end = None
        if closed:
            body = rest.take_n(rest.num_lines - 1)
            end = rest
            source = begin.append(body).append(end)
        else:
            body = rest
            source = begin.append(body)

        section = ast.Section(source=source, name=name)
        if not closed:
            self.add_error(UnclosedSectionError(section))

        self._push(body)
        self._parse_section_body(section)
        section.blocks = self._pop()

        if end is not None and parse_section_marker(end.text).missing_terminator:
            self.add_error(UnterminatedSectionMarker(end))
        self.add_block(section)

    @staticmethod
    def _is_section_end(line: str, name: str) -> bool:
        if not is_section_marker(line):
            return False
        marker = parse_section_marker(line)
        return marker.kind == SECTION_END and marker.name == name

    def _parse_section_body(self, section: ast.Section) -> None:
        while self.parse_blank():
            line = self._peek()
            if is_section_marker(line):
                self.parse_rogue_section_marker(section)
            elif group := self.config.group_starting_with(line):
                self.parse_group(section, group)
            elif group := self.config.group_ending_with(line):
                self.add_error(UnstartedGroupError(self.src.first(), group.name))
                self.parse_invalid()
            else:
                self.parse_suffix_block()

    def parse_rogue_section_marker(self, section: ast.Section) -> None:
        """Report a section marker found inside section, then skip it."""
        src = self.src.first()
        marker = parse_section_marker(src.text)
        if not marker.valid:
            self.add_error(UnknownSectionMarker(src))
        elif marker.kind == SECTION_BEGIN:
            self.add_error(NestedSectionError(src, marker.name, section))
        else:
            self.add_error(MismatchedSectionError(src, marker.name, section))
        self.parse_invalid()

    def parse_group(self, section: ast.Section, marker: GroupMarker) -> None:
        begin = self.src.take_one()
        rest, closed = self.src.take_until(lambda line: line == marker.end)

        if closed:
            body = rest.take_n(rest.num_lines - 1)
            source = begin.append(body).append(rest)
        else:
            body = rest
            source = begin.append(body)

        group = ast.Group(source=source, name=marker.name)
        if not closed:
            self.add_error(UnclosedGroupError(group))

        self._push(body)
        self._parse_group_body(section, group)
        group.blocks = self._pop()
        self.add_block(group)

    def _parse_group_body(self, section: ast.Section, group: ast.Group) -> None:
        while self.parse_blank():
            line = self._peek()
            if is_section_marker(line):
                self.parse_rogue_section_marker(section)
            elif other := self.config.group_starting_with(line):
                self.add_error(NestedGroupError(self.src.first(), other.name, group))
                self.parse_invalid()
            elif other := self.config.group_ending_with(line):
                self.add_error(MismatchedGroupError(self.src.first(), other.name, group))
                self.parse_invalid()
            else:
                self.parse_suffix_block()

    def parse_suffix_block(self) -> None:
        """Parse a run of comments and suffixes, up to a blank line or marker."""
        run = self.src.take_while_not(self.is_block_boundary)
        suffixes = ast.Suffixes(source=run)

        self._push(run)
        while not self.src.empty():
            if self.is_comment(self._peek()):
                self.parse_comment()
            else:
                self.parse_suffix()
        suffixes.blocks = self._pop()
        self.add_block(suffixes)

    def parse_suffix(self) -> None:
        text = self._peek()
        if text.startswith("!"):
            self.parse_suffix_exception()
            return
        if not is_suffix_text(text):
            self.parse_invalid_line("not a comment or a suffix")
            return

        wildcard = text.startswith("*.")
        domain = text[2:] if wildcard else text
        self.add_block(
            ast.Suffix(
                source=self.src.take_one(),
                labels=ast.DNSLabels.from_domain(domain),
                wildcard=wildcard,
            )
        )

    def parse_suffix_exception(self) -> None:
        src = self.src.first()
        domain = src.text[1:]
        if not is_suffix_text(domain):
            self.parse_invalid_line("not a valid exception")
            return

        if is_wildcard(domain):
            self.add_error(ExceptionAndWildcardSuffixError(src))
            self.parse_invalid()
            return

        base = self.last_block()
        if not isinstance(base, ast.Suffix):
            self.add_error(ExceptionNotDirectlyFollowingBaseError(src))
            self.parse_invalid()
            return

        labels = ast.DNSLabels.from_domain(domain)
        if not labels.is_direct_child_of(base.labels):
            self.add_error(InvalidExceptionError(src, base))
            self.parse_invalid()
            return

        if labels in base.exceptions:
            self.add_error(DuplicateExceptionError(src))
            self.parse_invalid()
            return

        base.source = base.source.append(self.src.take_one())
        base.exceptions.append(labels)


def parse(
    data: bytes | str,
    config: ParserConfig | None = None,
    is_exempt: ExemptionFilter | None = None,
) -> ast.File:
    """Parse data as a PSL file.

    Parsing never fails: problems are collected in File.errors, or in
    File.warnings when is_exempt returns True for them. A File with errors
    does not comply with the PSL format or submission guidelines, and must
    not be used to compute public suffixes.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")

    lines, encoding_errors = normalize(data)
    parser = Parser(Source(lines, 0), config=config, is_exempt=is_exempt)
    for err in encoding_errors:
        parser.add_error(err)
    return parser.parse()
