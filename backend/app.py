import os
import logging
from flask import Flask, jsonify, request
from flask_cors import CORS
from dotenv import load_dotenv

from config import load_config
from domain.constants import VALID_MOVES
from main import SnakeGame
from services.tick_scheduler import TickScheduler

load_dotenv()

app = Flask(__name__)
logging.basicConfig(level=logging.INFO)

# Enable CORS for API routes so a browser front end on another origin can poll the game
# Allowed origins can be configured via CORS_ALLOWED_ORIGINS env var (comma-separated)
allowed_origins_env = os.getenv("CORS_ALLOWED_ORIGINS")
if allowed_origins_env:
    allowed_origins = [o.strip() for o in allowed_origins_env.split(",") if o.strip()]
else:
    # sensible defaults for local dev
    allowed_origins = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

CORS(app, resources={r"/api/*": {"origins": allowed_origins}})

# One engine per process; the view layer only ever sees snapshots
game = SnakeGame(load_config())
ticker = TickScheduler(game)


@app.route("/api/config", methods=["GET"])
def get_config():
    """Return the active game configuration."""
    return jsonify(game.config.to_dict())


@app.route("/api/game", methods=["GET"])
def get_game():
    """
    Get the latest snapshot.

    Returns snake cells (head first), food, obstacles, score, speed,
    direction and game_state.
    """
    try:
        return jsonify(game.get_snapshot().to_dict())
    except Exception as error:
        logging.error(f"Error fetching game snapshot: {error}")
        return jsonify({"error": "Failed to load game"}), 500


@app.route("/api/game/board", methods=["GET"])
def get_board():
    """ASCII rendering of the current board."""
    snapshot = game.get_snapshot()
    return jsonify({"board": snapshot.print_board(), "game_state": snapshot.game_state})


def _start_session():
    try:
        ticker.stop()
        snapshot = game.start()
        ticker.start()
        return jsonify(snapshot.to_dict()), 200
    except Exception as error:
        logging.error(f"Error starting game: {error}")
        return jsonify({"error": "Failed to start game"}), 500


@app.route("/api/game/start", methods=["POST"])
def start_game():
    """Start a new session and begin ticking."""
    return _start_session()


@app.route("/api/game/restart", methods=["POST"])
def restart_game():
    """Play again - same reset as start."""
    return _start_session()


@app.route("/api/game/direction", methods=["POST"])
def request_direction():
    """
    Queue a direction for the next tick.

    Body: {"direction": "UP" | "DOWN" | "LEFT" | "RIGHT"}

    Returns {"accepted": bool}; reversals and input outside a running game
    are ignored rather than treated as errors.
    """
    payload = request.get_json(silent=True) or {}
    direction = str(payload.get("direction", "")).strip().upper()

    if direction not in VALID_MOVES:
        return jsonify({"error": f"Invalid direction '{payload.get('direction')}'"}), 400

    accepted = game.request_direction(direction)
    return jsonify({"accepted": accepted, "direction": direction}), 200


@app.route("/api/game/step", methods=["POST"])
def step_game():
    """
    Advance one tick by hand (for hosts that drive their own clock).

    Refused with 409 while the background ticker is running, so a period
    never gets two ticks.
    """
    if ticker.is_running:
        return jsonify({"error": "Game is being ticked automatically"}), 409

    try:
        return jsonify(game.step().to_dict()), 200
    except Exception as error:
        logging.error(f"Error stepping game: {error}")
        return jsonify({"error": "Failed to step game"}), 500


if __name__ == "__main__":
    # Run the Flask app in debug mode.
    app.run(debug=os.getenv("FLASK_DEBUG"))
