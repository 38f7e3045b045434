# Overview: Product lookup by UPC against the SearchUPCData API.

from __future__ import annotations

import httpx
from flask import current_app

from ..validation import ValidationError


class BarcodeLookupError(Exception):
    """Upstream lookup failed (not found, auth, network, bad payload)."""
    pass


class BarcodeNotFoundError(BarcodeLookupError):
    pass


def lookup_barcode(upc: str, *, transport: httpx.BaseTransport | None = None) -> dict:
    """
    Look up product information for a UPC.

    Returns {upc, description, brand, model, category}. The upstream
    `name` field is used as the description.

    Raises:
        ValidationError: If upc is empty
        BarcodeNotFoundError: If the upstream has no product for upc
        BarcodeLookupError: On any other upstream failure
    """
    upc = (upc or "").strip()
    if not upc:
        raise ValidationError("UPC is required")

    api_key = current_app.config.get("SEARCHUPCDATA_API_KEY")
    if not api_key:
        raise BarcodeLookupError("barcode lookup is not configured")

    url = f"{current_app.config['BARCODE_API_URL'].rstrip('/')}/{upc}"
    timeout = current_app.config.get("BARCODE_TIMEOUT_SECONDS", 10.0)

    try:
        with httpx.Client(timeout=timeout, transport=transport) as client:
            resp = client.get(url, headers={"Authorization": f"Bearer {api_key}"})
    except httpx.HTTPError as e:
        raise BarcodeLookupError(f"network error fetching barcode data: {e}") from e

    if resp.status_code == 404:
        raise BarcodeNotFoundError("barcode not found in database")
    if resp.status_code in (401, 403):
        raise BarcodeLookupError(
            f"barcode API authentication failed (status {resp.status_code})"
        )
    if resp.status_code != 200:
        raise BarcodeLookupError(
            f"barcode API returned an unexpected error (status {resp.status_code})"
        )

    try:
        data = resp.json()
    except ValueError as e:
        raise BarcodeLookupError("failed to parse barcode response") from e

    return {
        "upc": data.get("upc") or upc,
        "description": data.get("name") or "",
        "brand": data.get("brand") or "",
        "model": data.get("model") or "",
        "category": data.get("category") or "",
    }
