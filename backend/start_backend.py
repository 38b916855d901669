"""Entry point used to start the FastAPI backend without auto-reload."""
from __future__ import annotations

import argparse
import uvicorn


def main() -> None:
    parser = argparse.ArgumentParser(description="Start the Perizie backend API server.")
    parser.add_argument("--host", default="0.0.0.0", help="Bind address for the server.")
    parser.add_argument(
        "--port",
        default=8000,
        type=int,
        help="Listening port (default: 8000).",
    )
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload (development).")
    args = parser.parse_args()

    uvicorn.run(
        "perizie.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
