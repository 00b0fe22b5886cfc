"""Engine configuration.

EngineConfig is a frozen dataclass, immutable after creation and checked once
when built.
"""

import codecs
from dataclasses import dataclass

from formcheck.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Rule engine configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = EngineConfig(charset="latin-1", trim=False, strict=True)
    """

    # Encoding used to measure the length of byte values
    charset: str = "UTF-8"

    # Strip surrounding whitespace from every submitted value on construction
    trim: bool = True

    # Log configuration diagnostics at WARNING instead of DEBUG
    debug: bool = False

    # Raise ConfigurationError instead of skipping a misconfigured rule
    strict: bool = False

    def __post_init__(self) -> None:
        try:
            codecs.lookup(self.charset)
        except LookupError:
            msg = f"Unknown charset: {self.charset!r}"
            raise ConfigurationError(msg) from None
