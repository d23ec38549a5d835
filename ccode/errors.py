class CodeError(Exception):
    """ Base class for all ccode errors"""
    pass

class CodeSyntaxError(CodeError, SyntaxError):
    """ Raised when source text cannot be parsed or classified"""

    def __init__(self, message: str, pos: int | None = None):
        super().__init__(message)
        self.pos = pos

class RecursiveStructureError(CodeError, RecursionError):
    """ Raised when a value is reached again along its own serialization path"""

class ReferenceLookupError(CodeError, LookupError):
    """ Raised when no selector exists for an opaque value"""

class UnsupportedTypeError(CodeError, TypeError):
    """ Raised when a value's kind has no source representation"""

class SourceUnavailableError(UnsupportedTypeError):
    """ Raised when a function's definition text cannot be retrieved"""
