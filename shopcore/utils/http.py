"""
shopcore/utils/http.py
──────────────────────
Small helpers for reading UI payloads (JSON body or HTML form).
"""
from flask import request, abort


def payload() -> dict:
    """JSON body if present, else the submitted form."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def int_field(data: dict, name: str, default=None) -> int:
    """Read an integer field; a non-integer value aborts with 400."""
    raw = data.get(name, default)
    if raw is None:
        abort(400, description=f'{name} is required.')
    try:
        return int(raw)
    except (TypeError, ValueError):
        abort(400, description=f'{name} must be a whole number.')


def variant_field(data: dict) -> dict:
    """The `variant` attribute mapping; anything else counts as no variant."""
    variant = data.get('variant')
    return variant if isinstance(variant, dict) else {}


def line_variant(snapshot, data: dict, required: bool = True):
    """
    Resolve the payload's `variant` against a ProductSnapshot.

    Returns ``(chosen, attributes)`` where `attributes` is what the cart
    line is keyed by. With `required`, a variant product and no matching
    variant aborts with 400. Otherwise (and when the product is gone from
    the catalog) the raw attributes come back so an existing line can
    still be removed or resized.
    """
    requested = variant_field(data)
    if snapshot is None:
        return None, requested
    try:
        return snapshot.line_variant(requested)
    except ValueError as exc:
        if required:
            abort(400, description=str(exc))
        return None, requested
