"""Diagnostics reported while parsing a PSL file.

Diagnostics are exceptions in the sense that they describe a problem, but
the parser never raises them: they are collected in File.errors (or
File.warnings) and parsing carries on.
"""

from dataclasses import dataclass

from .ast import Group, Section, Suffix, Suffixes
from .source import Source


class PSLError(Exception):
    """Base class for all PSL diagnostics."""

    category = ""

    def __init__(self, msg: str):
        super().__init__(msg)
        self.msg = msg


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


class EncodingError(PSLError):
    category = "encoding"


class InvalidEncodingError(EncodingError):
    """The input is encoded with something other than UTF-8."""

    def __init__(self, encoding: str):
        super().__init__(f"file uses invalid character encoding {encoding}")
        self.encoding = encoding


class UTF8BOMError(EncodingError):
    def __init__(self):
        super().__init__("file starts with an unnecessary UTF-8 BOM (byte order mark)")


class DecodeError(EncodingError):
    """The input could not be decoded at all."""

    def __init__(self, reason: str):
        super().__init__(f"failed to decode file: {reason}")
        self.reason = reason


class LineError(EncodingError):
    """A problem with one raw input line."""

    template = ""

    def __init__(self, line: Source):
        super().__init__(self.template.format(loc=line.location_string()))
        self.line = line


class InvalidUTF8Error(LineError):
    template = "found non UTF-8 bytes at {loc}"


class DOSNewlineError(LineError):
    template = "{loc} has a DOS line ending (\\r\\n instead of just \\n)"


class TrailingWhitespaceError(LineError):
    template = "{loc} has trailing whitespace"


class LeadingWhitespaceError(LineError):
    template = "{loc} has leading whitespace"


# ---------------------------------------------------------------------------
# Structure: sections, groups, unparseable lines
# ---------------------------------------------------------------------------


class StructureError(PSLError):
    category = "structural"


class UnknownSectionMarker(StructureError):
    """A line looks like a section marker, but not a recognized kind."""

    def __init__(self, line: Source):
        super().__init__(
            f"unknown kind of section marker {line.text!r} at {line.location_string()}"
        )
        self.line = line


class UnterminatedSectionMarker(StructureError):
    """A section marker is missing the trailing "===", e.g. "// ===BEGIN ICANN DOMAINS"."""

    def __init__(self, source: Source):
        super().__init__(
            f'section marker {source.text!r} at {source.location_string()} '
            f'is missing trailing "==="'
        )
        self.source = source


class UnclosedSectionError(StructureError):
    def __init__(self, section: Section):
        super().__init__(
            f"section {section.name!r} at {section.source.location_string()} "
            f"is never closed"
        )
        self.section = section


class NestedSectionError(StructureError):
    """A section is started while already inside a section."""

    def __init__(self, source: Source, name: str, section: Section):
        super().__init__(
            f"new section {name!r} started at {source.location_string()} "
            f"while still in section {section.name!r} "
            f"(started at {section.source.first().location_string()})"
        )
        self.source = source
        self.name = name
        self.section = section


class UnstartedSectionError(StructureError):
    """A section end marker has no corresponding start."""

    def __init__(self, source: Source, name: str):
        super().__init__(
            f"section {name!r} closed at {source.location_string()} but was not started"
        )
        self.source = source
        self.name = name


class MismatchedSectionError(StructureError):
    """A section was started under one name and ended under another."""

    def __init__(self, source: Source, end_name: str, section: Section):
        super().__init__(
            f"section {end_name!r} closed at {source.location_string()} "
            f"while in section {section.name!r} "
            f"(started at {section.source.first().location_string()})"
        )
        self.source = source
        self.end_name = end_name
        self.section = section


class UnclosedGroupError(StructureError):
    def __init__(self, group: Group):
        super().__init__(
            f"group {group.name!r} at {group.source.location_string()} is never closed"
        )
        self.group = group


class NestedGroupError(StructureError):
    def __init__(self, source: Source, name: str, group: Group):
        super().__init__(
            f"new group {name!r} started at {source.location_string()} "
            f"while still in group {group.name!r} "
            f"(started at {group.source.first().location_string()})"
        )
        self.source = source
        self.name = name
        self.group = group


class UnstartedGroupError(StructureError):
    def __init__(self, source: Source, name: str):
        super().__init__(
            f"group {name!r} closed at {source.location_string()} but was not started"
        )
        self.source = source
        self.name = name


class MismatchedGroupError(StructureError):
    def __init__(self, source: Source, end_name: str, group: Group):
        super().__init__(
            f"group {end_name!r} closed at {source.location_string()} "
            f"while in group {group.name!r} "
            f"(started at {group.source.first().location_string()})"
        )
        self.source = source
        self.end_name = end_name
        self.group = group


class InvalidLineError(StructureError):
    """A line that is not a comment, suffix, marker or blank."""

    def __init__(self, source: Source, reason: str):
        super().__init__(f"invalid line {source.text!r} at {source.location_string()}: {reason}")
        self.source = source
        self.reason = reason


# ---------------------------------------------------------------------------
# Suffix semantics
# ---------------------------------------------------------------------------


class SuffixError(PSLError):
    category = "semantic"


class ExceptionAndWildcardSuffixError(SuffixError):
    def __init__(self, source: Source):
        super().__init__(
            f"suffix {source.text!r} at {source.location_string()} is both a "
            f"wildcard exception and a wildcard, which is not allowed"
        )
        self.source = source


class ExceptionNotDirectlyFollowingBaseError(SuffixError):
    def __init__(self, source: Source):
        super().__init__(
            f"exception {source.text!r} at {source.location_string()} must "
            f"directly follow the suffix it's modifying"
        )
        self.source = source


class InvalidExceptionError(SuffixError):
    def __init__(self, source: Source, parent: Suffix):
        super().__init__(
            f"exception {source.text!r} at {source.location_string()} is not a "
            f"valid exception to the wildcard {parent.source.first().text!r}"
        )
        self.source = source
        self.parent = parent


class DuplicateExceptionError(SuffixError):
    def __init__(self, source: Source):
        super().__init__(f"duplicate exception {source.text!r} at {source.location_string()}")
        self.source = source


class MissingEntityName(SuffixError):
    """A suffix block has no parseable owner name in its header comment."""

    def __init__(self, suffixes: Suffixes):
        super().__init__(
            f"could not find entity name for {suffixes.short_name()} "
            f"at {suffixes.source.location_string()}"
        )
        self.suffixes = suffixes


class MissingEntityEmail(SuffixError):
    """A suffix block has no parseable contact email in its header comment."""

    def __init__(self, suffixes: Suffixes):
        super().__init__(
            f"could not find a contact email for {suffixes.short_name()} "
            f"at {suffixes.source.location_string()}"
        )
        self.suffixes = suffixes


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------


@dataclass
class MoveSuffixBlock:
    """Move the block called name to just after the block insert_after.

    An empty insert_after means the start of the private section.
    """

    name: str
    insert_after: str = ""


class SuffixBlocksInWrongPlace(PSLError):
    """Some private-section suffix blocks are out of order.

    Each step of edit_script assumes the previous steps were applied.
    """

    category = "ordering"

    def __init__(self, edit_script: list[MoveSuffixBlock]):
        super().__init__(self._describe(edit_script))
        self.edit_script = list(edit_script)

    @staticmethod
    def _describe(edit_script: list[MoveSuffixBlock]) -> str:
        if len(edit_script) == 1:
            move = edit_script[0]
            if not move.insert_after:
                return (
                    f"suffix block {move.name!r} is in the wrong place, "
                    f"should be at the start of the private section"
                )
            return (
                f"suffix block {move.name!r} is in the wrong place, "
                f"it should go immediately after block {move.insert_after!r}"
            )

        lines = [
            f"{len(edit_script)} suffix blocks are in the wrong place, "
            f"make these changes to fix:"
        ]
        for move in edit_script:
            lines.append(f"\tmove block: {move.name}")
            if move.insert_after:
                lines.append(f"\t     after: {move.insert_after}")
            else:
                lines.append("\t        to: start of private section")
        return "\n".join(lines) + "\n"
