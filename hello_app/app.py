import logging
import os
import signal
import socket
import sys

from flask import Flask, Response
from werkzeug.serving import make_server

app = Flask(__name__)

HOST = "0.0.0.0"
DEFAULT_PORT = 3000
GREETING = "Hello world\n"


# --- Configuration ---
def get_port(environ=None):
    """Reads the listen port from PORT, falling back to DEFAULT_PORT."""
    if environ is None:
        environ = os.environ
    raw = environ.get("PORT")
    if not raw:
        return DEFAULT_PORT
    try:
        port = int(raw)
    except ValueError:
        app.logger.warning(f"Ignoring non-numeric PORT={raw!r}, using {DEFAULT_PORT}")
        return DEFAULT_PORT
    if not 0 < port < 65536:
        app.logger.warning(f"Ignoring out-of-range PORT={port}, using {DEFAULT_PORT}")
        return DEFAULT_PORT
    return port


# --- Routes ---
@app.route("/", methods=["GET"], provide_automatic_options=False)
def hello():
    """Serves the static greeting. Also used by the liveness/readiness probes."""
    return Response(GREETING, mimetype="text/plain")


# --- Startup ---
def bind_socket(host, port):
    """Binds and listens on host:port. Raises OSError if the address is unavailable."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
        sock.listen()
    except OSError:
        sock.close()
        raise
    return sock


def handle_sigterm(signum, frame):
    """Ends serve_forever when the container runtime stops the pod."""
    app.logger.info("Received SIGTERM, shutting down")
    raise SystemExit(0)


def main():
    """Binds the configured port and serves until terminated."""
    logging.basicConfig(level=logging.INFO)
    port = get_port()

    try:
        sock = bind_socket(HOST, port)
    except OSError as e:
        app.logger.error(f"Could not bind {HOST}:{port}: {e}")
        sys.exit(1)

    with sock:
        server = make_server(HOST, port, app, threaded=True, fd=sock.fileno())
    signal.signal(signal.SIGTERM, handle_sigterm)
    app.logger.info(f"Listening on http://{HOST}:{port}")
    server.serve_forever()


if __name__ == "__main__":
    main()
