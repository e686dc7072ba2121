"""Custom exceptions for the extension manager.

Provides user-friendly error messages and structured error handling.
"""

from typing import Optional, Sequence


class ExtManError(Exception):
    """Base exception for all extman errors.

    Provides:
    - User-friendly message
    - Technical details for debugging
    - Suggested fixes when applicable
    """

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        suggestion: Optional[str] = None,
        cause: Optional[Exception] = None
    ):
        self.message = message
        self.details = details
        self.suggestion = suggestion
        self.cause = cause
        super().__init__(message)

    def format_user_friendly(self) -> str:
        """Format error for display to user."""
        parts = [f"❌ {self.message}"]

        if self.details:
            parts.append(f"   Details: {self.details}")

        if self.suggestion:
            parts.append(f"   💡 Try: {self.suggestion}")

        return "\n".join(parts)

    def __str__(self) -> str:
        return self.format_user_friendly()


class ConfigError(ExtManError):
    """Configuration and manifest errors."""

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        suggestion = kwargs.pop("suggestion", None)
        if not suggestion and config_key:
            suggestion = f"Set the {config_key} environment variable or add it to .env"
        super().__init__(message, suggestion=suggestion, **kwargs)
        self.config_key = config_key


class ExtensionError(ExtManError):
    """Extension-related errors raised by the manager."""

    def __init__(
        self,
        message: str,
        extension_name: Optional[str] = None,
        version: Optional[str] = None,
        **kwargs
    ):
        details = kwargs.pop("details", None)
        if not details:
            parts = []
            if extension_name:
                parts.append(f"Extension: {extension_name}")
            if version:
                parts.append(f"Version: {version}")
            if parts:
                details = ", ".join(parts)

        super().__init__(message, details=details, **kwargs)
        self.extension_name = extension_name
        self.version = version


class VersionFormatError(ExtManError):
    """A version or version range string could not be parsed."""

    def __init__(self, message: str, value: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", None)
        if not details and value is not None:
            details = f"Value: {value!r}"
        super().__init__(message, details=details, **kwargs)
        self.value = value


def format_chain(chain: Sequence[str]) -> str:
    """Render a requirement chain, innermost requirer first."""
    return "\n".join(f"    required by {item}" for item in chain)


class ResolutionError(ExtManError):
    """Base class for load/unload planning failures.

    Carries the requirement chain that led to the failure, innermost
    requirer first.
    """

    def __init__(
        self,
        message: str,
        extension_id: Optional[str] = None,
        chain: Sequence[str] = (),
        **kwargs
    ):
        details = kwargs.pop("details", None)
        if not details and chain:
            details = "\n" + format_chain(chain)
        super().__init__(message, details=details, **kwargs)
        self.extension_id = extension_id
        self.chain = tuple(chain)


class UnavailableExtensionError(ResolutionError):
    """A dependency is not registered, or its version does not satisfy the requirement."""

    def __init__(
        self,
        extension_id: str,
        required: Optional[str] = None,
        actual: Optional[str] = None,
        chain: Sequence[str] = (),
        **kwargs
    ):
        if actual is not None:
            message = f"Unmatched version: {extension_id}({required}), got {actual}"
        else:
            message = f"Unavailable extension: {extension_id}"
        suggestion = kwargs.pop("suggestion", None)
        if not suggestion:
            if actual is not None:
                suggestion = f"Register a version of {extension_id} matching {required}"
            else:
                suggestion = f"Register {extension_id} before loading extensions that need it"
        super().__init__(message, extension_id=extension_id, chain=chain, suggestion=suggestion, **kwargs)
        self.required = required
        self.actual = actual


class CircularRequirementError(ResolutionError):
    """An extension reappears within its own requirement chain."""

    def __init__(self, extension_id: str, chain: Sequence[str] = (), **kwargs):
        super().__init__(
            f"Circular requirement: {extension_id}",
            extension_id=extension_id,
            chain=chain,
            **kwargs
        )


class NoTopologicalOrderError(ResolutionError):
    """The dependency graph contains a cycle and cannot be linearised.

    The resolvers reject cycles before sorting, so seeing this error means
    an internal invariant was broken.
    """

    def __init__(self, remaining: Sequence[str] = (), **kwargs):
        details = kwargs.pop("details", None)
        if not details and remaining:
            details = f"Unordered nodes: {', '.join(remaining)}"
        super().__init__("No topological order", details=details, **kwargs)
        self.remaining = tuple(remaining)


class DuplicatedEdgeError(ExtManError):
    """An identical edge was inserted twice. Recoverable."""

    def __init__(self, source: str, target: str, **kwargs):
        super().__init__(f"Duplicated edge: {source} -> {target}", **kwargs)
        self.source = source
        self.target = target


def format_exception_chain(error: Exception, max_depth: int = 5) -> str:
    """Format an exception chain for display.

    Handles nested exceptions and provides clean output.
    """
    lines = []
    current = error
    depth = 0

    while current and depth < max_depth:
        if isinstance(current, ExtManError):
            lines.append(current.format_user_friendly())
        else:
            lines.append(f"❌ {type(current).__name__}: {current}")

        current = getattr(current, "__cause__", None) or getattr(current, "cause", None)
        depth += 1

        if current:
            lines.append("   Caused by:")

    return "\n".join(lines)
