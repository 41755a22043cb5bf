"""Block tree for parsed PSL files.

Although the PSL looks like a flat file, the parser turns its implicit
structure into explicit nodes:

       toplevel : list[section | comment | suffixes | blank | invalid]
        section : list[group | suffixes | blank | invalid]
          group : list[suffixes | blank | invalid]
       suffixes : list[comment | suffix | invalid]
        comment : some unparsed comment lines
         suffix : one suffix and its exceptions
          blank : one or more blank lines
        invalid : some text that failed to parse

Blank and invalid nodes carry no meaning, but keeping them means every
input line belongs to exactly one top-level block, so the tree can be
written back out with the exact original layout.
"""

from collections.abc import Iterator
from typing import Annotated, Any
from typing import Literal as TypingLiteral

from pydantic import BaseModel, ConfigDict, Field, GetCoreSchemaHandler
from pydantic_core import core_schema

from .source import Source


class DNSLabels(list):
    """Labels of a domain name, TLD first.

    "foo.example.uk" is ["uk", "example", "foo"], the reverse of
    domain.split("."). Because of this ordering, a parent domain is a
    prefix of its children, and is_direct_child_of compares prefixes.
    """

    @classmethod
    def from_domain(cls, domain: str) -> "DNSLabels":
        # TODO: full DNS validation (IDNA, label lengths, empty labels).
        return cls(reversed(domain.split(".")))

    def __str__(self) -> str:
        return ".".join(reversed(self))

    def is_direct_child_of(self, parent: list[str]) -> bool:
        if len(self) != len(parent) + 1:
            return False
        return list(self[: len(parent)]) == list(parent)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_after_validator_function(cls, handler(list[str]))


class _Node(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    source: Source

    @property
    def text(self) -> str:
        return self.source.text

    @property
    def children(self) -> list["Block"]:
        return []

    def location_string(self) -> str:
        return self.source.location_string()


class BlankLines(_Node):
    type: TypingLiteral["blank"] = "blank"


class InvalidSource(_Node):
    """Lines that could not be parsed."""

    type: TypingLiteral["invalid"] = "invalid"


class Comment(_Node):
    type: TypingLiteral["comment"] = "comment"


class Suffix(_Node):
    """One suffix rule, together with its exception lines."""

    type: TypingLiteral["suffix"] = "suffix"
    labels: DNSLabels
    wildcard: bool = False
    exceptions: list[DNSLabels] = Field(default_factory=list)

    @property
    def domain(self) -> str:
        return str(self.labels)


class Suffixes(_Node):
    """A block of suffixes, usually with a header comment.

    entity, urls and emails come from the header comment and are filled in
    by metadata extraction, not by the parser.
    """

    type: TypingLiteral["suffixes"] = "suffixes"
    entity: str | None = None
    urls: list[str] = []
    emails: list[str] = []
    blocks: list["Block"] = []

    @property
    def children(self) -> list["Block"]:
        return self.blocks

    @property
    def entries(self) -> list[Suffix]:
        return [b for b in self.blocks if isinstance(b, Suffix)]

    def short_name(self) -> str:
        if self.entity:
            return repr(self.entity)
        return f"{len(self.entries)} unowned suffixes"


class Group(_Node):
    """A named run of suffix blocks inside a section (e.g. "Amazon")."""

    type: TypingLiteral["group"] = "group"
    name: str
    blocks: list["Block"] = []

    @property
    def children(self) -> list["Block"]:
        return self.blocks


class Section(_Node):
    """A top-level named region, e.g. "ICANN DOMAINS"."""

    type: TypingLiteral["section"] = "section"
    name: str
    blocks: list["Block"] = []

    @property
    def children(self) -> list["Block"]:
        return self.blocks


Block = Annotated[
    BlankLines | InvalidSource | Comment | Section | Group | Suffixes | Suffix,
    Field(discriminator="type"),
]


def walk(blocks: list[Block]) -> Iterator[Block]:
    """Yield blocks depth-first, parents before their children."""
    for block in blocks:
        yield block
        yield from walk(block.children)


class File(BaseModel):
    """A parsed PSL file.

    A File with errors must not be used to compute public suffixes, but it
    is still safe to inspect and to write back out.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    blocks: list[Block] = []
    errors: list[Any] = []  # PSLError instances
    warnings: list[Any] = []  # errors downgraded by an exemption

    @property
    def lines(self) -> list[str]:
        return [line for block in self.blocks for line in block.source.lines]

    def text(self) -> str:
        return "\n".join(self.lines)

    def suffix_blocks(self) -> list[Suffixes]:
        return [b for b in walk(self.blocks) if isinstance(b, Suffixes)]

    def sections(self) -> list[Section]:
        return [b for b in self.blocks if isinstance(b, Section)]


# Rebuild models for forward references
Suffixes.model_rebuild()
Group.model_rebuild()
Section.model_rebuild()
File.model_rebuild()
