# SPDX-License-Identifier: MIT


class AikaError(Exception):
    """Base class for errors surfaced to the caller."""

    pass


class ValidationError(AikaError):
    """Raised before any side effect when input is rejected."""

    pass


class PersistenceError(AikaError):
    """Raised when an entry store operation fails."""

    pass
