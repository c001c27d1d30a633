# deepstoker/api.py
"""
HTTP control API for a single reactor engine.

A thin Flask front end: every route maps onto one engine call and answers
with a JSON ``{"ok": ...}`` envelope built by ``success_dict`` / ``error_dict``.
"""

import logging
from typing import Any, Optional

from flask import Flask, jsonify, request

from deepstoker.core.scheduler import ThreadingScheduler
from deepstoker.reactor.engine import ReactorEngine
from deepstoker.reactor.scoring import apply_failure_penalty
from deepstoker.reactor.state import Control
from deepstoker.utils.errors import UserError, error_dict, invalid_choice_error, success_dict

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 5000


def _payload() -> dict:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def _bad_request(error_type: str, message: str, **kwargs):
    return jsonify(error_dict(error_type, message, **kwargs)), 400


def create_app(engine: Optional[ReactorEngine] = None, scheduler=None) -> Flask:
    """
    Build the Flask app

    Args:
        engine: Engine to expose; a real-time one is created when omitted
        scheduler: Scheduler for the created engine

    Returns:
        Flask: Configured application; the engine is ``app.config["ENGINE"]``
    """
    if engine is None:
        engine = ReactorEngine(scheduler=scheduler or ThreadingScheduler())

    app = Flask(__name__)
    app.config["ENGINE"] = engine

    @app.errorhandler(UserError)
    def handle_user_error(exc: UserError):
        logger.warning(f"Rejected request: {exc}")
        return _bad_request(type(exc).__name__, str(exc))

    @app.post("/api/session")
    def api_create_session():
        payload = _payload()
        snapshot = engine.initialize(
            rank=payload.get("rank", "Novice"),
            upgrades=payload.get("upgrades", ()),
            initial_hull_integrity=payload.get("hullIntegrity", payload.get("hull_integrity", 100.0)),
            config=payload.get("config"),
        )
        return jsonify(success_dict("Session initialized", state=snapshot.to_dict()))

    @app.post("/api/session/start")
    def api_start_session():
        if not engine.is_active:
            return _bad_request("NO_SESSION", "Create a session before starting it")
        engine.start()
        return jsonify(success_dict("Session started", state=engine.get_state().to_dict()))

    @app.post("/api/session/stop")
    def api_stop_session():
        engine.stop()
        return jsonify(success_dict("Session stopped", state=engine.get_state().to_dict()))

    @app.post("/api/session/pause")
    def api_pause_session():
        paused = _payload().get("paused", True)
        if not isinstance(paused, bool):
            return _bad_request("INVALID_PARAMETER", "'paused' must be true or false")
        engine.set_paused(paused)
        return jsonify(success_dict("Paused" if paused else "Resumed", state=engine.get_state().to_dict()))

    @app.post("/api/control")
    def api_control():
        payload = _payload()
        name = payload.get("control")
        choices = [c.value for c in Control]
        if name not in choices:
            return _bad_request("INVALID_CHOICE", invalid_choice_error("control", name, choices))

        aligned = bool(payload.get("inOptimalBand", payload.get("in_optimal_band", False)))
        reduction = engine.apply_control(Control(name), aligned)
        return jsonify(success_dict("Control applied", reduction=reduction,
                                    state=engine.get_state().to_dict()))

    @app.post("/api/purge")
    def api_purge():
        purged = engine.trigger_emergency_purge()
        status = "Emergency purge activated" if purged else "Purge unavailable"
        return jsonify(success_dict(status, purged=purged, state=engine.get_state().to_dict()))

    @app.get("/api/state")
    def api_state():
        return jsonify(success_dict("OK", state=engine.get_state().to_dict()))

    @app.get("/api/reward")
    def api_reward():
        reward = engine.compute_reward()
        body: dict[str, Any] = {"reward": reward.to_dict()}
        result = engine.result
        if result is not None:
            body["final_total"] = apply_failure_penalty(reward, result.success).total
        return jsonify(success_dict("OK", **body))

    @app.get("/api/result")
    def api_result():
        result = engine.result
        if result is None:
            return jsonify(error_dict("NO_RESULT", "No shift has finished yet")), 404
        return jsonify(success_dict("OK", result=result.to_dict()))

    return app


if __name__ == "__main__":
    from deepstoker.utils.logger import setup_logging

    setup_logging()
    create_app().run(host=DEFAULT_HOST, port=DEFAULT_PORT, debug=False)
