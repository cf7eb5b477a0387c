"""Coverage document models: transient parse structures rebuilt per call."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class MarkdownSection(BaseModel):
    """One record produced by the line scanner.

    ``lines`` keeps line endings, and for a heading record starts with
    the heading line itself. Level 0 is the preamble before any heading.
    """

    model_config = ConfigDict(frozen=True)

    level: int
    heading: str | None = None
    lines: list[str] = []

    @property
    def text(self) -> str:
        return "".join(self.lines)


class TestBlock(BaseModel):
    """A named ``### Test:`` block. ``content`` includes the heading line."""

    __test__ = False  # not a pytest class

    model_config = ConfigDict(frozen=True)

    name: str
    content: str


class CoverageDocument(BaseModel):
    """A coverage markdown file as ordered test blocks plus free text."""

    model_config = ConfigDict(frozen=True)

    leading: str = ""
    blocks: list[TestBlock] = []
    trailing: str = ""

    @property
    def test_names(self) -> list[str]:
        return [b.name for b in self.blocks]

    def get_block(self, name: str) -> TestBlock | None:
        for block in self.blocks:
            if block.name == name:
                return block
        return None


class DeltaDocument(BaseModel):
    """The three optional sections of a delta coverage file.

    ``None`` means the section is absent, which the merge treats as a no-op.
    """

    model_config = ConfigDict(frozen=True)

    added: str | None = None
    modified: list[TestBlock] | None = None
    removed: list[str] | None = None

    @property
    def is_empty(self) -> bool:
        return self.added is None and self.modified is None and self.removed is None


class PlannedWrite(BaseModel):
    """A coverage file the sync intends to write, relative to the main root."""

    model_config = ConfigDict(frozen=True)

    relative_path: str  # POSIX separators
    content: str
    seeded: bool = False  # True when no main document existed
