"""Azure Functions entry point for the KML Geometry Pipeline.

Registers the HTTP functions using the Python v2 programming model.

All business logic lives in the kml_geometry package. This file is purely
the wiring layer between Azure Functions bindings and application code.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

import azure.functions as func

from kml_geometry.core.config import PipelineConfig
from kml_geometry.core.ingress import handle_conversion

if TYPE_CHECKING:
    from kml_geometry.core.ingress import View

app = func.FunctionApp(http_auth_level=func.AuthLevel.FUNCTION)

logger = logging.getLogger("kml_geometry.function_app")


def _respond(req: func.HttpRequest, view: View) -> func.HttpResponse:
    """Run the conversion for *view* and serialise the result as JSON."""
    correlation_id = req.headers.get("x-correlation-id", "") or ""
    filename = req.params.get("filename", "") or ""

    try:
        status, body = handle_conversion(
            req.get_body(),
            view,
            PipelineConfig.from_env(),
            filename=filename,
            correlation_id=correlation_id,
        )
    except Exception:
        logger.exception(
            "Unhandled error converting KML | view=%s | correlation_id=%s",
            view,
            correlation_id,
        )
        raise

    return func.HttpResponse(
        json.dumps(body),
        status_code=status,
        mimetype="application/json",
    )


# ---------------------------------------------------------------------------
# HTTP: KML → GeoJSON (render-ready, decimated)
# ---------------------------------------------------------------------------


@app.function_name("kml_to_geojson")
@app.route(route="kml/geojson", methods=["POST"])
def kml_to_geojson(req: func.HttpRequest) -> func.HttpResponse:
    """Return the optimised FeatureCollection, its bounds and the extractor used."""
    return _respond(req, "geojson")


# ---------------------------------------------------------------------------
# HTTP: Reports
# ---------------------------------------------------------------------------


@app.function_name("kml_summary")
@app.route(route="kml/summary", methods=["POST"])
def kml_summary(req: func.HttpRequest) -> func.HttpResponse:
    """Return feature counts per geometry kind."""
    return _respond(req, "summary")


@app.function_name("kml_detail")
@app.route(route="kml/detail", methods=["POST"])
def kml_detail(req: func.HttpRequest) -> func.HttpResponse:
    """Return one row per feature with name, description and line length."""
    return _respond(req, "detail")
