"""Thin ingress boundary helpers for the Azure Functions HTTP entrypoints.

Centralises the transport concerns so that ``function_app.py`` contains
only route bindings and handoff:

- **decode_upload**: checks the uploaded file name and size and
  decodes the body to text.
- **error_payload**: turns a ``PipelineError`` into the JSON error body.
- **handle_conversion**: runs the pipeline and shapes the response for
  one of the three views (``geojson``, ``summary``, ``detail``).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Literal

from kml_geometry.activities.parse_kml import KmlParseError
from kml_geometry.core.exceptions import PipelineError, ValidationError
from kml_geometry.orchestrators.kml_pipeline import convert_kml

if TYPE_CHECKING:
    from kml_geometry.core.config import PipelineConfig

logger = logging.getLogger("kml_geometry.core.ingress")

View = Literal["geojson", "summary", "detail"]

HTTP_OK = 200
HTTP_BAD_REQUEST = 400
HTTP_UNPROCESSABLE = 422


class UploadRejectedError(ValidationError):
    """Raised when an uploaded body cannot be handed to the pipeline."""

    default_stage = "ingress"
    default_code = "UPLOAD_REJECTED"


# ---------------------------------------------------------------------------
# Upload decoding
# ---------------------------------------------------------------------------


def decode_upload(body: bytes, *, filename: str = "", max_bytes: int) -> str:
    """Validate an uploaded KML body and decode it to text.

    Args:
        body: Raw request body.
        filename: Client-side file name, if supplied; must end in ``.kml``.
        max_bytes: Largest accepted body size.

    Raises:
        UploadRejectedError: If the name, size or encoding is unacceptable.
    """
    if filename and not filename.lower().endswith(".kml"):
        raise UploadRejectedError("Please upload a valid KML file", code="NOT_KML")

    if not body:
        raise UploadRejectedError("Request body is empty", code="EMPTY_BODY")

    if len(body) > max_bytes:
        msg = f"KML file is {len(body)} bytes, limit is {max_bytes}"
        raise UploadRejectedError(msg, code="UPLOAD_TOO_LARGE")

    try:
        return body.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        msg = "Error reading the file. Please try again."
        raise UploadRejectedError(msg, code="UNREADABLE_BODY") from exc


# ---------------------------------------------------------------------------
# Error payloads
# ---------------------------------------------------------------------------


def error_payload(exc: PipelineError) -> dict[str, object]:
    """Build the JSON error body for *exc*.

    Parse failures get the user-facing "Failed to parse KML file" wording;
    other errors report their message as-is.
    """
    if isinstance(exc, KmlParseError):
        message = f"Failed to parse KML file: {exc.message}. Please check the file format."
    else:
        message = exc.message
    return {"error": message, "details": exc.to_error_dict()}


# ---------------------------------------------------------------------------
# Request handling
# ---------------------------------------------------------------------------


def handle_conversion(
    body: bytes,
    view: View,
    config: PipelineConfig,
    *,
    filename: str = "",
    correlation_id: str = "",
) -> tuple[int, dict[str, object]]:
    """Run the pipeline on an uploaded body and shape the response.

    Returns:
        ``(status_code, json_body)``. Upload rejections are 400, parse
        failures 422. Anything else propagates to the caller.
    """
    try:
        text = decode_upload(body, filename=filename, max_bytes=config.max_upload_bytes)
        result = convert_kml(text, max_points=config.max_render_points)
    except (UploadRejectedError, KmlParseError) as exc:
        exc.correlation_id = correlation_id
        status = HTTP_BAD_REQUEST if isinstance(exc, UploadRejectedError) else HTTP_UNPROCESSABLE
        logger.warning(
            "KML request rejected | code=%s | status=%d | correlation_id=%s | %s",
            exc.code,
            status,
            correlation_id,
            exc.message,
        )
        return status, error_payload(exc)

    payload: dict[str, object]
    if view == "summary":
        payload = {"summary": result.summary().as_mapping()}
    elif view == "detail":
        payload = {"rows": result.detail().to_rows()}
    else:
        bounds = result.collection.bounds()
        payload = {
            "geojson": result.to_render_geojson(),
            "bounds": list(bounds) if bounds is not None else None,
            "parser": result.parser,
        }

    logger.info(
        "KML request served | view=%s | features=%d | correlation_id=%s",
        view,
        len(result.collection),
        correlation_id,
    )
    return HTTP_OK, payload
