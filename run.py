"""Entry point serving the Mockapi HTTP API.

Host and port are read from the ``HOST`` and ``PORT`` environment
variables (defaults ``0.0.0.0`` and ``8000``); everything else is
configured through the variables documented in
``mockapi.app.core.config``.

Usage:
    python run.py
"""
import logging
import os

from uvicorn import Config, Server

from mockapi.app.main import app


def main() -> None:
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    config = Config(app=app, host=host, port=port, reload=False, log_level="info")
    Server(config).run()


if __name__ == "__main__":
    try:
        main()
    except (KeyboardInterrupt, SystemExit):
        pass
    except Exception:
        logging.exception("Server stopped with an error")
        raise
