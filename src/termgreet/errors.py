class TermgreetError(Exception):
    """Base class for errors raised by termgreet."""


class ProtocolError(TermgreetError):
    """The graphics protocol tier could not transmit an image."""


class ProtocolUnavailable(ProtocolError):
    """The terminal does not support the kitty graphics protocol."""


class DirectModeUnavailable(ProtocolError):
    """The image cannot be sent by file reference."""


class ImageDecodeError(TermgreetError):
    """The image file could not be read or decoded."""


class ConfigError(TermgreetError):
    pass


class MotdError(TermgreetError):
    pass
