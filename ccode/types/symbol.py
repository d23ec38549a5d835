from __future__ import annotations


class ScriptSymbol:
    """
    An opaque symbol value. Two symbols are never equal unless they are the
    same object, whatever their descriptions, so symbols are only ever
    serialized by selector.
    """
    __slots__ = ("description",)

    def __init__(self, description: str | None = None):
        self.description = description

    def __repr__(self):
        if self.description is None:
            return "Symbol()"
        return f"Symbol({self.description!r})"

    def __str__(self):
        return f"Symbol({self.description or ''})"
