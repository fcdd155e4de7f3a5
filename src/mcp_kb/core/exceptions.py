"""Exception hierarchy for MCP-KB."""

from typing import Any


class KBError(Exception):
    """Base exception for all MCP-KB errors.

    Carries a human-readable message and a details dict that the
    operations layer forwards in structured failures.
    """

    code = "internal_error"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigError(KBError):
    """Missing or malformed persisted configuration or ledger."""

    code = "config_error"


class ValidationError(KBError):
    """Invalid arguments to an operation."""

    code = "invalid_arguments"


class QueryTooShortError(ValidationError):
    """Search query shorter than the minimum accepted length."""


class ProviderError(KBError):
    """Failure reported by the repository content provider."""

    code = "provider_error"

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code

    @property
    def transient(self) -> bool:
        return False


class TransientProviderError(ProviderError):
    """Network failure, rate limit or server error; may succeed on retry."""

    @property
    def transient(self) -> bool:
        return True


class PermanentProviderError(ProviderError):
    """Auth failure, missing repository or other non-retryable error."""


class PatternError(KBError):
    """Malformed include/exclude pattern."""

    code = "invalid_arguments"


class IntegrityError(KBError):
    """Ledger entry whose stored hash does not match its fields."""

    code = "integrity_error"


class SyncUnavailableError(KBError):
    """Sync requested but no content provider or configuration is available."""

    code = "sync_unavailable"


class BlocklistUnavailableError(KBError):
    """Blocklist ledger could not be loaded at startup."""

    code = "blocklist_unavailable"


class SpecificationUnavailableError(KBError):
    """Specification store could not be loaded at startup."""

    code = "specification_unavailable"
