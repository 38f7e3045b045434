# Overview: Flask API route for UPC product lookup.

from flask import Blueprint, request, jsonify, current_app

from ..services import barcode_service
from ..services.barcode_service import BarcodeLookupError, BarcodeNotFoundError
from ..validation import ValidationError


barcode_bp = Blueprint("barcode", __name__, url_prefix="/api")

# Upstream detail is logged, never returned.
NOT_FOUND_MESSAGE = "No product found for this UPC."
UNAVAILABLE_MESSAGE = "Product lookup is unavailable. Please try again."


@barcode_bp.get("/barcode-lookup")
def barcode_lookup_route():
    """Prefill data for the inventory form: {upc, description, brand, model, category}."""
    try:
        product = barcode_service.lookup_barcode(request.args.get("upc"))
    except ValidationError as e:
        return jsonify({"ok": False, "error": str(e)})
    except BarcodeNotFoundError as e:
        current_app.logger.info("Barcode lookup miss: %s", e)
        return jsonify({"ok": False, "error": NOT_FOUND_MESSAGE, "code": "not_found"})
    except BarcodeLookupError as e:
        current_app.logger.warning("Barcode lookup failed: %s", e)
        return jsonify({"ok": False, "error": UNAVAILABLE_MESSAGE, "code": "lookup_failed"})

    return jsonify({"ok": True, "product": product})
