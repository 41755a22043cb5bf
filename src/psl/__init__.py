"""psl: parse and validate Public Suffix List files.

Pipeline: raw bytes -> normalized UTF-8 lines -> block tree + diagnostics.

Example:
    from psl import parse

    psl = parse(open("public_suffix_list.dat", "rb").read())
    for err in psl.errors:
        print(err)
"""

__version__ = "0.1.0"

from .ast import (
    BlankLines,
    Block,
    Comment,
    DNSLabels,
    File,
    Group,
    InvalidSource,
    Section,
    Suffix,
    Suffixes,
    walk,
)
from .config import (
    AMAZON_GROUP,
    DEFAULT_CONFIG,
    ConfigError,
    GroupMarker,
    ParserConfig,
    config_from_dict,
    load_config,
)
from .encoding import guess_encoding, normalize
from .errors import (
    DecodeError,
    DOSNewlineError,
    DuplicateExceptionError,
    ExceptionAndWildcardSuffixError,
    ExceptionNotDirectlyFollowingBaseError,
    InvalidEncodingError,
    InvalidExceptionError,
    InvalidLineError,
    InvalidUTF8Error,
    LeadingWhitespaceError,
    MismatchedGroupError,
    MismatchedSectionError,
    MissingEntityEmail,
    MissingEntityName,
    MoveSuffixBlock,
    NestedGroupError,
    NestedSectionError,
    PSLError,
    SuffixBlocksInWrongPlace,
    TrailingWhitespaceError,
    UnclosedGroupError,
    UnclosedSectionError,
    UnknownSectionMarker,
    UnstartedGroupError,
    UnstartedSectionError,
    UnterminatedSectionMarker,
    UTF8BOMError,
)
from .parser import Parser, parse
from .source import Source

__all__ = [
    # Parse
    "parse",
    "Parser",
    "normalize",
    "guess_encoding",
    "Source",
    # Config
    "ParserConfig",
    "GroupMarker",
    "AMAZON_GROUP",
    "DEFAULT_CONFIG",
    "ConfigError",
    "config_from_dict",
    "load_config",
    # Blocks
    "File",
    "Block",
    "BlankLines",
    "InvalidSource",
    "Comment",
    "Section",
    "Group",
    "Suffixes",
    "Suffix",
    "DNSLabels",
    "walk",
    # Diagnostics
    "PSLError",
    "InvalidEncodingError",
    "UTF8BOMError",
    "DecodeError",
    "InvalidUTF8Error",
    "DOSNewlineError",
    "TrailingWhitespaceError",
    "LeadingWhitespaceError",
    "UnknownSectionMarker",
    "UnterminatedSectionMarker",
    "UnclosedSectionError",
    "NestedSectionError",
    "UnstartedSectionError",
    "MismatchedSectionError",
    "UnclosedGroupError",
    "NestedGroupError",
    "UnstartedGroupError",
    "MismatchedGroupError",
    "InvalidLineError",
    "ExceptionAndWildcardSuffixError",
    "ExceptionNotDirectlyFollowingBaseError",
    "InvalidExceptionError",
    "DuplicateExceptionError",
    "MissingEntityName",
    "MissingEntityEmail",
    "SuffixBlocksInWrongPlace",
    "MoveSuffixBlock",
]
