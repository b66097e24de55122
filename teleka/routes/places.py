# teleka/routes/places.py
"""Maps proxy and pricing routes."""

import logging

from flask import Blueprint, jsonify, request

from teleka.api.maps import MapsError, get_default_maps_proxy
from teleka.api.models import TrafficLevel
from teleka.api.pricing import PricingError, quote_from_distance
from teleka.api.services.price_service import PriceService

logger = logging.getLogger(__name__)


def _missing(name):
    return jsonify({
        "status": "INVALID_REQUEST",
        "error_message": f"Missing required parameter: {name}",
    }), 400


def _maps_failure(error):
    return jsonify({"status": error.status, "error_message": str(error)}), 500


def create_places_blueprint(maps=None, price_service=None):
    """Create the Maps proxy blueprint.

    Args:
        maps: MapsProxy used for every upstream call (default: shared proxy)
        price_service: PriceService for /api/calculate-price

    Returns:
        Configured Flask Blueprint
    """
    maps = maps or get_default_maps_proxy()
    price_service = price_service or PriceService(maps)

    places_bp = Blueprint("places", __name__)

    @places_bp.route("/api/places/autocomplete")
    def autocomplete():
        """Relay Places Autocomplete predictions."""
        text = request.args.get("input", "").strip()
        if not text:
            return _missing("input")
        try:
            return jsonify(maps.autocomplete(
                text,
                session_token=request.args.get("sessiontoken", ""),
                types=request.args.get("types"),
            ))
        except MapsError as e:
            return _maps_failure(e)

    @places_bp.route("/api/places/nearby")
    def nearby():
        """Relay Nearby Search results around the caller's position."""
        location = request.args.get("location", "").strip()
        if not location:
            return _missing("location")
        try:
            return jsonify(maps.nearby(
                location,
                session_token=request.args.get("sessiontoken", ""),
                types=request.args.get("types"),
            ))
        except MapsError as e:
            return _maps_failure(e)

    @places_bp.route("/api/places/details")
    def details():
        """Relay Place Details for a selected prediction."""
        place_id = request.args.get("place_id", "").strip()
        if not place_id:
            return _missing("place_id")
        try:
            return jsonify(maps.details(place_id, session_token=request.args.get("sessiontoken", "")))
        except MapsError as e:
            return _maps_failure(e)

    @places_bp.route("/api/calculate-price")
    def calculate_price():
        """Quote a trip between two addresses."""
        origin = request.args.get("origin", "").strip()
        destination = request.args.get("destination", "").strip()
        if not origin or not destination:
            return jsonify({"error": "origin and destination are required"}), 400
        try:
            quote = price_service.calculate(origin, destination)
        except (PricingError, MapsError) as e:
            logger.warning(f"Price calculation failed for {origin!r} -> {destination!r}: {e}")
            return jsonify({"error": str(e)}), 500
        return jsonify(quote.to_dict())

    @places_bp.route("/api/price-from-distance")
    def price_from_distance():
        """Diagnostic: apply the fare formula to a raw distance."""
        km_arg = request.args.get("km")
        if km_arg is None:
            return jsonify({"error": "km is required"}), 400
        try:
            km = float(km_arg)
            level = TrafficLevel.parse(request.args.get("traffic", "low"))
            breakdown = quote_from_distance(km, level, price_service.config)
        except ValueError as e:
            return jsonify({"error": str(e)}), 400
        return jsonify(breakdown.to_dict())

    return places_bp


__all__ = ["create_places_blueprint"]
