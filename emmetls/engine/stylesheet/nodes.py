from __future__ import annotations

from dataclasses import dataclass, field

from emmetls.engine.fields import Value


@dataclass(frozen=True)
class Declaration:
    """A single ``property: value`` pair, e.g. from ``p10!``."""

    property: str
    # None means "let the user type it"
    value: Value | None = None
    important: bool = False
    offset: int = 0


@dataclass
class StylesheetAbbreviation:
    """Declarations in abbreviation order, which is also output order."""

    declarations: list[Declaration] = field(default_factory=list)
