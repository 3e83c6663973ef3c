"""
Exception hierarchy for geometry decoding.

Internal errors are fine-grained for diagnostics. The host-facing
``decode()`` entry point folds all of them into ``InvalidAttributeValueError``.
"""


class GeometryDecodeError(ValueError):
    """Base class for all parse-time failures."""


class FormatError(GeometryDecodeError):
    """Unrecognized or malformed top-level encoding."""


class StructuralError(GeometryDecodeError):
    """Wrong child arity, unterminated nesting or bad coordinate token count."""


class CRSFormatError(GeometryDecodeError):
    """Unparseable CRS/SRS reference."""


class NamespaceError(GeometryDecodeError):
    """XML namespace is not one of the supported GML dialects."""


class InvalidAttributeValueError(ValueError):
    """
    Uniform failure surfaced to the policy engine.

    The originating ``GeometryDecodeError`` is available as ``__cause__``.
    """


class IndeterminateEvaluationError(Exception):
    """A function was called with arguments it cannot evaluate."""
