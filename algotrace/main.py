"""
main.py — algotrace Flask App
==============================
A JSON control surface over the trace engine and the step player.
Rendering is the client's job: every response carries the active step
as plain JSON (see engine/serialize.py).

Routes:
  GET  /api/algorithms          – registry cards (label, params, pseudocode …)
  GET  /api/algorithms/<key>    – one card
  GET  /api/samples             – names of the built-in sample inputs
  POST /api/run                 – validate input, generate the trace, load the player
  POST /api/player/<action>     – start | pause | resume | reset | forward | back | toggle
  POST /api/player/seek         – {"index": n}
  POST /api/player/speed        – {"ms": n} or {"preset": "fast"}
  GET  /api/state               – player status + the active step
  GET  /api/trace               – the whole recorded run

State management:
  Each browser session gets an id in the Flask session cookie.  The id
  maps to an in-memory Player + Recorder pair.  At most MAX_SESSIONS pairs
  are kept (least recently used dropped first) and nothing survives a
  restart.
"""

import logging
import secrets
import threading
from collections import OrderedDict
from dataclasses import asdict
from typing import Any, Dict, Optional

from flask import Flask, abort, current_app, jsonify, request, session

from algotrace.algorithms import get_algorithm, list_algorithms
from algotrace.config import DefaultConfig, configure_logging
from algotrace.engine import Player, Recorder, ThreadingScheduler, step_to_dict
from algotrace.errors import InvalidInputError, PreconditionError, TraceLimitError
from algotrace.graph import Board, Graph
from algotrace.graph.samples import SAMPLES


logger = logging.getLogger(__name__)


PLAYER_ACTIONS = {
    "start":   Player.start,
    "pause":   Player.pause,
    "resume":  Player.resume,
    "reset":   Player.reset,
    "forward": Player.step_forward,
    "back":    Player.step_backward,
    "toggle":  Player.toggle_play,
}


# ---------------------------------------------------------------------------
# Per-session state
# ---------------------------------------------------------------------------
class Session:
    __slots__ = ("player", "recorder")

    def __init__(self, player: Player, recorder: Recorder):
        self.player   = player
        self.recorder = recorder


class SessionStore:
    """
    session-id → Session, guarded by a lock (Flask may serve requests on threads).

    At most `max_sessions` are kept.  When a new one would exceed that, the
    least recently used session is dropped and its player unloaded, which
    cancels any pending playback tick.
    """

    def __init__(self, factory, max_sessions: int = DefaultConfig.MAX_SESSIONS):
        self._factory = factory
        self._sessions: "OrderedDict[str, Session]" = OrderedDict()
        self._lock = threading.Lock()
        self.max_sessions = max(1, int(max_sessions))

    def get(self, sid: str) -> Session:
        with self._lock:
            if sid in self._sessions:
                self._sessions.move_to_end(sid)
                return self._sessions[sid]
            while len(self._sessions) >= self.max_sessions:
                old_sid, old = self._sessions.popitem(last=False)
                old.player.unload()
                logger.info("Evicted idle session %s", old_sid[:8])
            sess = self._factory()
            self._sessions[sid] = sess
            return sess

    def __contains__(self, sid: str) -> bool:
        return sid in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)


def _store() -> SessionStore:
    return current_app.extensions["algotrace"]


def current_session() -> Session:
    if "sid" not in session:
        session["sid"] = secrets.token_hex(16)
    return _store().get(session["sid"])


# ---------------------------------------------------------------------------
# Request parsing
# ---------------------------------------------------------------------------
def _body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidInputError("Request body must be a JSON object")
    return data


def build_structure(input_kind: str, data: Dict[str, Any]) -> Any:
    """Turn the request body into the Graph / Board / list the algorithm expects."""
    sample = data.get("sample")
    if sample is not None:
        if sample not in SAMPLES:
            raise InvalidInputError(f"Unknown sample {sample!r}")
        return SAMPLES[sample]()

    try:
        if input_kind == "graph":
            if not isinstance(data.get("graph"), dict):
                raise InvalidInputError("Missing graph")
            return Graph.from_dict(data["graph"])
        if input_kind == "board":
            raw = data.get("board")
            if isinstance(raw, dict):
                return Board.from_dict(raw)
            if isinstance(raw, list):
                return Board.from_strings(raw)
            raise InvalidInputError("Missing board")
        if input_kind == "array":
            if "array" not in data:
                raise InvalidInputError("Missing array")
            return data["array"]
    except InvalidInputError:
        raise
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise InvalidInputError(f"Malformed {input_kind}: {exc}") from None
    return None


def _player_response(sess: Session, **extra) -> Dict[str, Any]:
    step = sess.player.current_step
    out = {
        "status": sess.player.status(),
        "step":   step_to_dict(step) if step is not None else None,
    }
    out.update(extra)
    return out


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------
def create_app(config: Optional[Dict[str, Any]] = None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(DefaultConfig)
    app.config.from_prefixed_env("ALGOTRACE")
    if config:
        app.config.update(config)
    app.secret_key = app.config.get("SECRET_KEY") or secrets.token_hex(32)
    configure_logging(app.config["LOG_LEVEL"])

    scheduler_factory = app.config.get("SCHEDULER_FACTORY") or ThreadingScheduler

    def new_session() -> Session:
        player = Player(
            scheduler=scheduler_factory(),
            speed_ms=app.config["DEFAULT_SPEED_MS"],
            min_speed_ms=app.config["MIN_SPEED_MS"],
            max_speed_ms=app.config["MAX_SPEED_MS"],
        )
        return Session(player, Recorder(max_steps=app.config["MAX_TRACE_STEPS"]))

    app.extensions["algotrace"] = SessionStore(new_session, app.config["MAX_SESSIONS"])
    register_routes(app)
    return app


def register_routes(app: Flask) -> None:

    # -----------------------------------------------------------------
    # Errors
    # -----------------------------------------------------------------
    @app.errorhandler(InvalidInputError)
    def handle_invalid_input(exc):
        logger.warning("Rejected input: %s", exc)
        return jsonify({"error": str(exc)}), 400

    @app.errorhandler(PreconditionError)
    def handle_precondition(exc):
        logger.warning("Precondition failed: %s", exc)
        return jsonify({"error": str(exc)}), 422

    @app.errorhandler(TraceLimitError)
    def handle_trace_limit(exc):
        logger.warning("Trace too long: %s", exc)
        return jsonify({"error": str(exc)}), 422

    # -----------------------------------------------------------------
    # Catalogue
    # -----------------------------------------------------------------
    @app.route("/api/algorithms")
    def api_algorithms():
        return jsonify({"algorithms": [info.to_dict() for info in list_algorithms()]})

    @app.route("/api/algorithms/<key>")
    def api_algorithm(key):
        info = get_algorithm(key)
        if info is None:
            abort(404)
        return jsonify(info.to_dict())

    @app.route("/api/samples")
    def api_samples():
        return jsonify({"samples": sorted(SAMPLES)})

    # -----------------------------------------------------------------
    # Run
    # -----------------------------------------------------------------
    @app.route("/api/run", methods=["POST"])
    def api_run():
        data = _body()
        key = data.get("algorithm")
        info = get_algorithm(key) if isinstance(key, str) else None
        if info is None:
            raise InvalidInputError(f"Unknown algorithm {key!r}")

        params = data.get("params") or {}
        if not isinstance(params, dict):
            raise InvalidInputError("params must be a JSON object")
        structure = build_structure(info.input_kind, data)

        sess = current_session()
        sess.player.unload()
        metrics = sess.recorder.run(key, structure, **params)
        sess.player.load(sess.recorder.trace)
        logger.info("Run %s: %d step(s), outcome %s", key, metrics.total_steps, metrics.outcome)

        return jsonify(_player_response(
            sess,
            algorithm=info.to_dict(),
            metrics=asdict(metrics),
        ))

    # -----------------------------------------------------------------
    # Playback
    # -----------------------------------------------------------------
    @app.route("/api/player/seek", methods=["POST"])
    def api_player_seek():
        data = _body()
        index = data.get("index")
        if isinstance(index, bool) or not isinstance(index, int):
            raise InvalidInputError("index must be an integer")
        sess = current_session()
        sess.player.seek(index)
        return jsonify(_player_response(sess))

    @app.route("/api/player/speed", methods=["POST"])
    def api_player_speed():
        data = _body()
        sess = current_session()
        if "preset" in data:
            if data["preset"] not in app.config["SPEED_PRESETS"]:
                raise InvalidInputError(f"Unknown speed preset {data['preset']!r}")
            sess.player.set_speed(app.config["SPEED_PRESETS"][data["preset"]])
        elif "ms" in data:
            ms = data["ms"]
            if isinstance(ms, bool) or not isinstance(ms, (int, float)):
                raise InvalidInputError("ms must be a number")
            sess.player.set_speed(ms)
        else:
            raise InvalidInputError("Send either ms or preset")
        return jsonify(_player_response(sess))

    @app.route("/api/player/<action>", methods=["POST"])
    def api_player_action(action):
        fn = PLAYER_ACTIONS.get(action)
        if fn is None:
            abort(404)
        sess = current_session()
        fn(sess.player)
        return jsonify(_player_response(sess))

    @app.route("/api/state")
    def api_state():
        return jsonify(_player_response(current_session()))

    @app.route("/api/trace")
    def api_trace():
        return jsonify(current_session().recorder.export())


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    create_app().run(debug=True, host="0.0.0.0", port=5000)
