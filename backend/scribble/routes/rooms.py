from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from ..storage.backends import StoreUnavailable

bp = Blueprint("rooms", __name__)


@bp.get("/rooms/<code>")
def get_room(code: str):
    engine = current_app.extensions["scribble_engine"]
    try:
        state = engine.public_state(code)
    except StoreUnavailable:
        current_app.logger.exception("store unavailable while reading room %s", code)
        return jsonify({"error": "store_unavailable"}), 503
    if state is None:
        return jsonify({"error": "room_not_found"}), 404
    return jsonify(state)
