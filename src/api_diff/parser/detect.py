"""Detect which API description dialect a loaded document uses."""

from api_diff.errors import MalformedDocumentError


def detect_version(raw: dict, source: str | None = None) -> str:
    """Detect the dialect of a loaded document.

    Returns: 'openapi3' or 'swagger2'.
    """
    if "openapi" in raw:
        if str(raw["openapi"]).startswith("3"):
            return "openapi3"
        raise MalformedDocumentError(f"Unsupported OpenAPI version: {raw['openapi']}", source)
    if "swagger" in raw:
        if str(raw["swagger"]).startswith("2"):
            return "swagger2"
        raise MalformedDocumentError(f"Unsupported Swagger version: {raw['swagger']}", source)
    raise MalformedDocumentError("Not an OpenAPI or Swagger document (no 'openapi' or 'swagger' key)", source)
