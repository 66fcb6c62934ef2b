from __future__ import annotations

from emmetls.engine.config import Config
from emmetls.engine.fields import Field, FieldNumbering
from emmetls.engine.stylesheet.nodes import Declaration, StylesheetAbbreviation


def stringify_stylesheet(abbreviation: StylesheetAbbreviation, config: Config) -> str:
    """Render declarations one per line, in abbreviation order."""
    fields = FieldNumbering()
    return config.newline.join(
        _declaration(declaration, scope, fields, config)
        for scope, declaration in enumerate(abbreviation.declarations)
    )


def _declaration(
    declaration: Declaration, scope: int, fields: FieldNumbering, config: Config
) -> str:
    # Each declaration numbers its own template fields
    if declaration.value:
        parts: list[str] = []
        for part in declaration.value:
            if isinstance(part, Field):
                index = fields.explicit(part.index, scope)
                parts.append(config.format_field(index, part.placeholder))
            else:
                parts.append(config.format_text(part))
        value = "".join(parts)
    else:
        value = config.format_field(fields.auto(), "")

    if declaration.important:
        value += " !important"

    return f"{declaration.property}{config.between}{value}{config.after}"
