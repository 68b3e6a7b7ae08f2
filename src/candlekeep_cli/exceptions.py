"""Custom exception hierarchy for candlekeep-cli.

All exceptions that cross layer boundaries must inherit from
:class:`CandleKeepError`.  Raw third-party exceptions (e.g. from
``requests`` or ``yaml``) must NEVER propagate beyond the
infrastructure layer — they must be caught and re-raised as a typed
subclass defined here.

Hierarchy
---------
CandleKeepError
├── InputValidationError
│   ├── MalformedSelectorError
│   ├── DuplicateIdentifierError
│   ├── EmptyEnrichmentRequestError
│   ├── BlankEnrichmentFieldError
│   ├── InvalidConfidenceError
│   ├── InvalidTocJsonError
│   ├── InvalidTocEntryError
│   ├── UnsupportedFileTypeError
│   ├── InputFileError
│   └── EmptyContentError
├── ConfigError
├── NotAuthenticatedError
├── ApiError
│   ├── BadRequestError
│   ├── AuthenticationFailedError
│   ├── AccessDeniedError
│   └── NotFoundError
├── ApiConnectionError
├── UnexpectedResponseError
└── MissingDependencyError
"""

from __future__ import annotations


class CandleKeepError(Exception):
    """Base exception for all candlekeep-cli errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- User input ------------------------------------------------------------

class InputValidationError(CandleKeepError):
    """Raised when command input is rejected before any request is sent."""


class MalformedSelectorError(InputValidationError):
    """Raised when an item/page selector violates the selector grammar."""


class DuplicateIdentifierError(InputValidationError):
    """Raised when an identifier repeats in a selector used as a set."""

    def __init__(self, identifier: str, *, hint: str | None = None) -> None:
        super().__init__(f"Duplicate ID in selector: '{identifier}'", hint=hint)
        self.identifier: str = identifier


class EmptyEnrichmentRequestError(InputValidationError):
    """Raised when an enrichment call supplies none of the metadata fields."""


class BlankEnrichmentFieldError(InputValidationError):
    """Raised when an enrichment flag is given but blank after trimming."""


class InvalidConfidenceError(InputValidationError):
    """Raised when a confidence score falls outside ``[0.0, 1.0]``."""


class InvalidTocJsonError(InputValidationError):
    """Raised when the ``--toc`` payload is not a well-formed JSON array."""


class InvalidTocEntryError(InputValidationError):
    """Raised when one table-of-contents entry fails field validation."""

    def __init__(self, index: int, reason: str) -> None:
        super().__init__(
            f"Invalid TOC entry at index {index}: {reason}",
            hint='Each entry needs {"title": "...", "page": 1, "level": 1}.',
        )
        self.index: int = index
        self.reason: str = reason


class UnsupportedFileTypeError(InputValidationError):
    """Raised when an upload is neither PDF nor Markdown."""


class InputFileError(InputValidationError):
    """Raised when a local input file is missing or unreadable."""


class EmptyContentError(InputValidationError):
    """Raised when a document body to upload is empty."""


# --- Local configuration ---------------------------------------------------

class ConfigError(CandleKeepError):
    """Raised when the config file cannot be read, parsed, or written."""


class NotAuthenticatedError(CandleKeepError):
    """Raised when a command needs an API key and none is stored."""


# --- Remote API ------------------------------------------------------------

class ApiError(CandleKeepError):
    """Raised when the API answers with a non-success status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.status_code: int = status_code


class BadRequestError(ApiError):
    """HTTP 400 — the server rejected the request payload."""


class AuthenticationFailedError(ApiError):
    """HTTP 401 — the API key is missing, revoked, or wrong."""


class AccessDeniedError(ApiError):
    """HTTP 403 — the account may not access the resource."""


class NotFoundError(ApiError):
    """HTTP 404 — the resource does not exist."""


class ApiConnectionError(CandleKeepError):
    """Raised when the API cannot be reached (DNS, refused, timeout)."""


class UnexpectedResponseError(CandleKeepError):
    """Raised when the API returns a body that cannot be interpreted."""


# --- Environment / tooling -------------------------------------------------

class MissingDependencyError(CandleKeepError):
    """Raised when an optional runtime dependency is not available."""
