"""Web server entry point for the taskboard API"""

import socket

import uvicorn
from dotenv import load_dotenv

# Load environment variables from .env file BEFORE building the app
load_dotenv()

from taskboard.utils.config import load_settings  # noqa: E402
from taskboard_web.main import create_app  # noqa: E402


def _port_in_use(host: str, port: int) -> bool:
    """Return True if the given port is already in use."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        try:
            s.bind((host, port))
            return False
        except OSError:
            return True


if __name__ == "__main__":
    settings = load_settings()
    host = settings.server.host
    port = settings.server.port
    if _port_in_use(host, port):
        raise SystemExit(
            f"Port {port} is in use. Stop the process using it or set TASKBOARD_PORT."
        )

    app = create_app(settings)
    print(f"Starting {settings.app.name} API on http://{host}:{port}")
    print("Docs: /docs")

    try:
        uvicorn.run(
            app,
            host=host,
            port=port,
            log_config=None,  # keep the structlog handlers installed by create_app
            reload=False,
        )
    except KeyboardInterrupt:
        print("\nShutting down...")
