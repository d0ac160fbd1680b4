"""
Run the proxy under uvicorn.
"""

from __future__ import annotations

import argparse
import logging

import uvicorn

from campus_proxy.config import get_settings


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run the Supabase proxy server.")
    parser.add_argument("--host", default=None, help="Bind address (default: HOST)")
    parser.add_argument("--port", type=int, default=None, help="Port (default: PORT)")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    uvicorn.run(
        "campus_proxy.app:create_app",
        factory=True,
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
