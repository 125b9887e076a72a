"""Library-neutral markup element stream consumed by the tree builder.

Readers translate a parsed document into these objects. The builder never
looks at markup syntax itself.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Tuple, Union


@dataclass
class TextBlock:
    """A text child of an element.

    ``verbatim`` marks a CDATA section, whose whitespace is significant.
    """

    text: str
    verbatim: bool = False

    @property
    def is_blank(self) -> bool:
        return self.text.strip() == ""


@dataclass
class OtherBlock:
    """A child construct that carries no data (comment, processing instruction)."""

    kind: str


@dataclass
class MarkupElement:
    """One element: its name, ordered attributes and ordered child constructs."""

    name: str
    attributes: List[Tuple[str, str]] = field(default_factory=list)
    children: List[Union["MarkupElement", TextBlock, OtherBlock]] = field(
        default_factory=list
    )

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Element name cannot be empty")

    @property
    def child_elements(self) -> Iterator["MarkupElement"]:
        return (c for c in self.children if isinstance(c, MarkupElement))

    def iter(self) -> Iterator["MarkupElement"]:
        """Yield this element and all descendant elements in document order."""
        yield self
        for child in self.child_elements:
            yield from child.iter()


Construct = Union[MarkupElement, TextBlock, OtherBlock]
