"""Entry point for running TicTacTree via ``python -m tictactree``."""

from __future__ import annotations

import logging
import os

import uvicorn


def main() -> None:
    """Start the FastAPI-powered TicTacTree web server."""

    logging.basicConfig(
        level=os.environ.get("TICTACTREE_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    host = os.environ.get("TICTACTREE_HOST", "0.0.0.0")
    port = int(os.environ.get("TICTACTREE_PORT", "8000"))
    uvicorn.run("tictactree.ui:app", host=host, port=port, reload=False)


if __name__ == "__main__":
    main()
