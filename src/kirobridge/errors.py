from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class BridgeError(RuntimeError):
    """Represents an expected, structured failure raised by a bridge component.

    The error covers conditions such as a missing spec root or a malformed
    JSON record. Unexpected I/O failures are left as plain OSError so callers
    can tell "could not read" apart from "content is wrong".

    The optional data payload is intended to carry machine-readable context
    (e.g., the offending path, missing keys, the external command).
    """

    message: str
    data: dict[str, object] | None = None

    def __str__(self) -> str:
        return self.message


class SpecNotFoundError(BridgeError):
    """Raised when the spec root holds no usable spec directory."""


class MalformedMetadataError(BridgeError):
    """Raised when a persisted JSON record cannot be parsed or validated."""


class ExternalToolError(BridgeError):
    """Raised when an external command cannot be started or times out."""


class ConfigError(BridgeError):
    """Raised when a conventions configuration file is invalid."""
