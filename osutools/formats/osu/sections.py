"""Splits a .osu document into its header version and raw section lines

Known quirks of real world files :
  - line endings can be \\n or \\r\\n
  - some editors save a UTF-8 BOM
  - // comments can appear anywhere, except in [Events] where they are part
    of the storyboard and must be kept
  - [Events] lines are indented to express storyboard nesting, so they are
    never trimmed
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from parsimonious import Grammar, NodeVisitor, ParseError
from parsimonious.nodes import Node

from .commons import EVENTS
from .errors import StructuralError

header_grammar = Grammar(
    r"""
    header  = prefix "file format" ws "v" version rest
    prefix  = ~r".*?(?=file format)"
    version = ~r"\d+"
    ws      = ~r"[\t ]*"
    rest    = ~r".*"
    """
)


class HeaderVisitor(NodeVisitor):

    """Returns the format version as an int"""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.version: Optional[int] = None

    def visit_header(self, node: Node, visited_children: List[Node]) -> int:
        if self.version is None:
            raise ValueError("No version found after parsing header")
        return self.version

    def visit_version(self, node: Node, visited_children: List[Node]) -> None:
        self.version = int(node.text)

    def generic_visit(self, node: Node, visited_children: List[Node]) -> None:
        ...


def parse_header(line: str) -> int:
    try:
        return HeaderVisitor().visit(header_grammar.parse(line.strip()))  # type: ignore
    except ParseError:
        raise StructuralError(
            f"The first line should look like 'osu file format v14' "
            f"but {line!r} was found"
        ) from None


SECTION_HEADER = re.compile(r"^\[(?P<name>[^\]]+)\]$")
LINE_BREAK = re.compile(r"\r?\n")


@dataclass
class SplitDocument:
    version: int
    # raw lines of each section, in document order
    sections: Dict[str, List[str]] = field(default_factory=dict)


def split_sections(text: str) -> SplitDocument:
    lines = LINE_BREAK.split(text.lstrip("\ufeff"))
    non_empty = (line for line in lines if line.strip())
    try:
        header = next(non_empty)
    except StopIteration:
        raise StructuralError("Empty document") from None

    document = SplitDocument(version=parse_header(header))
    current: Optional[List[str]] = None
    in_events = False
    for line in non_empty:
        stripped = line.strip()
        match = SECTION_HEADER.match(stripped)
        if match is not None:
            name = match["name"]
            current = document.sections.setdefault(name, [])
            in_events = name == EVENTS
        elif current is None:
            # stray lines between the header and the first section
            continue
        elif in_events:
            current.append(line)
        elif not stripped.startswith("//"):
            current.append(stripped)

    return document
