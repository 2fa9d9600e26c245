from __future__ import annotations

import os
import sys
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request

# Make game.py importable when this file is loaded from another working directory.
if __package__ in (None, ""):
    sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

from game import (  # noqa: E402
    ConfigurationError,
    GameStateMachine,
    SessionView,
    WinResult,
    load_config,
)

app = Flask(__name__)

# One in-process session per server; rendering happens client-side from /api/state.
machine = GameStateMachine(load_config())


def _view_to_json(v: SessionView) -> Dict[str, Any]:
    cards = []
    for card in v.deck:
        face_up = v.is_face_up(card.id)
        cards.append({
            "id": card.id,
            # Face-down symbols stay hidden from the client.
            "symbol": str(card.symbol) if face_up else None,
            "faceUp": face_up,
            "matched": card.id in v.matched,
        })
    return {
        "status": v.status.value,
        "moves": v.moves,
        "elapsedSeconds": v.elapsed_seconds,
        "gridDimension": machine.config.grid_dimension,
        "cards": cards,
        "selection": list(v.selection),
        "matched": sorted(v.matched),
    }


def state_to_json() -> Dict[str, Any]:
    return _view_to_json(machine.view())


def _result_to_json(r: WinResult) -> Dict[str, Any]:
    return {"moves": r.moves, "elapsedSeconds": r.elapsed_seconds}


def _json_body() -> Optional[Dict[str, Any]]:
    """Returns the request's JSON object, {} when there is no body, None when it is not an object."""
    body = request.get_json(force=True, silent=True)
    if body is None:
        return {}
    return body if isinstance(body, dict) else None


def _bad_body() -> Any:
    return jsonify({"ok": False, "error": "JSON object body required"}), 400


@app.get("/api/state")
def api_state() -> Any:
    return jsonify({"ok": True, "state": state_to_json()})


@app.post("/api/start")
def api_start() -> Any:
    body = _json_body()
    if body is None:
        return _bad_body()
    seed = body.get("seed", None)
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
        return jsonify({"ok": False, "error": "seed must be an integer"}), 400
    try:
        if seed is not None:
            machine.seed(seed)
        machine.start()
    except ConfigurationError as e:
        app.logger.warning(f"[api-start] rejected: {e}")
        return jsonify({"ok": False, "error": str(e)}), 400
    return jsonify({"ok": True, "state": state_to_json()})


@app.post("/api/reset")
def api_reset() -> Any:
    machine.reset()
    return jsonify({"ok": True, "state": state_to_json()})


@app.post("/api/flip")
def api_flip() -> Any:
    body = _json_body()
    if body is None:
        return _bad_body()
    card_id = body.get("id")
    if isinstance(card_id, bool) or not isinstance(card_id, int):
        return jsonify({"ok": False, "error": "id (integer) required"}), 400
    accepted = machine.flip(card_id)
    return jsonify({"ok": True, "accepted": accepted, "state": state_to_json()})


@app.get("/api/result")
def api_result() -> Any:
    r = machine.last_result
    return jsonify({"ok": True, "result": _result_to_json(r) if r else None})


# Entrypoint for "python app.py"
if __name__ == "__main__":
    debug = os.getenv("FLASK_DEBUG", os.getenv("DEBUG", "0")).lower() in ("1", "true", "yes", "on")
    # Single process: the reloader would run a second session with its own timers.
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")), debug=debug, use_reloader=False)
