"""Error taxonomy for sprite-atlas.

Every failure a caller can see is an ``AtlasError`` carrying one
descriptive message. Library functions raise them; the command registry
and the CLI turn them into a single error string.
"""


class AtlasError(Exception):
    """Base class for every caller-visible sprite-atlas failure."""

    pass


class DecodeError(AtlasError):
    """An input image or its base64 payload could not be decoded."""

    pass


class EmptyInput(AtlasError):
    """No sprites were supplied to the packing engine."""

    pass


class DuplicateSpriteName(AtlasError):
    """Two sprites share a name, so the manifest could not key them."""

    pass


class PackingInfeasible(AtlasError):
    """No canvas size at any scale factor accommodates all sprites."""

    pass


class CompositionError(AtlasError):
    """A placed rectangle does not fit the computed canvas.

    This is an internal invariant violation. It is unreachable with a
    correct packer but is surfaced instead of producing a broken atlas.
    """

    pass


class EncodeError(AtlasError):
    """The final image could not be serialized."""

    pass
