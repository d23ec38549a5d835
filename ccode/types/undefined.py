from __future__ import annotations


class UndefinedType:
    """The runtime's `undefined`: distinct from `None`, which stands for `null`."""
    def __repr__(self): return "undefined"
    def __bool__(self): return False

    def __eq__(self, other):
        return isinstance(other, UndefinedType)

    def __hash__(self):
        return hash(UndefinedType)


class HoleType:
    """Marks an array index that was never assigned (`[1, , 3]`)."""
    def __repr__(self): return "<hole>"
    def __bool__(self): return False

    def __eq__(self, other):
        return isinstance(other, HoleType)

    def __hash__(self):
        return hash(HoleType)


Undefined = UndefinedType()
Hole = HoleType()
