"""Exceptions raised by api-diff."""


class ApiDiffError(Exception):
    """Base exception for api-diff errors."""


class MalformedDocumentError(ApiDiffError):
    """Raised when an input document is not a usable API description."""

    def __init__(self, message: str, source: str | None = None):
        super().__init__(message)
        self.message = message
        self.source = source


class RuleFaultError(ApiDiffError):
    """Raised when a rule fails on an input shape it cannot interpret."""

    def __init__(self, rule_id: str, cause: Exception):
        super().__init__(f"Rule {rule_id} failed: {cause}")
        self.rule_id = rule_id
        self.cause = cause


class SourceLoadError(ApiDiffError):
    """Raised when a document cannot be read from a file or URL."""

    def __init__(self, location: str, reason: str):
        super().__init__(f"Cannot load {location}: {reason}")
        self.location = location
        self.reason = reason
