"""Error taxonomy for PNGEditor."""


class PNGEditError(Exception):
    """Base class for editor errors."""
    pass


class LoadError(PNGEditError):
    """Image could not be loaded; no document state was changed."""
    pass


class DecodeError(LoadError):
    """File is missing, unreadable, or not a decodable image."""
    pass


class SaveError(PNGEditError):
    """Image could not be written; in-memory state is unaffected."""
    pass


class EncodeError(SaveError):
    """Pixel data could not be encoded or the target is unwritable."""
    pass


class DisplayError(PNGEditError):
    """Texture upload or update failed."""
    pass


class NoImageLoaded(PNGEditError):
    """Operation requires an open document."""
    pass


class InvalidDimensions(PNGEditError, ValueError):
    """Byte length does not match width * height * 4, or a dimension is not positive."""
    pass


class SizeMismatch(PNGEditError, ValueError):
    """Replacement pixel data does not match the loaded buffer's shape."""
    pass
