"""Domain-specific errors for xledctl."""


class XledError(Exception):
    """Base error for xledctl."""


class ConfigLoadError(XledError):
    """Raised when the config file cannot be read."""


class ConfigValidationError(XledError):
    """Raised when the config file does not conform to schema or semantics."""


class EffectResolutionError(XledError):
    """Raised when an effect name does not match a bundled frame producer."""


class TransportError(XledError):
    """Base transport error."""


class TransportConnectError(TransportError):
    """Raised when the device endpoint cannot be resolved or connected."""


class DeviceResponseError(TransportError):
    """Raised when the device replies with data the client cannot use."""


class ChannelUninitialized(TransportError):
    """Raised when a frame is sent before the datagram channel is initialized."""


class ChannelSendError(TransportError):
    """Raised when sending a frame datagram fails."""


class SessionError(XledError):
    """Base session error."""


class AuthError(SessionError):
    """Raised when the login handshake cannot produce a usable token."""


class VerifyError(SessionError):
    """Raised when the device does not accept a token."""
