#!/usr/bin/env python3
"""Serve search box sessions over HTTP."""

import os

import uvicorn
from dotenv import load_dotenv

load_dotenv()

if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="SuggestBox session server")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes")
    parser.add_argument("--providers", help="Suggestion provider registry (YAML)")
    parser.add_argument(
        "--log-level",
        default=os.getenv("LOG_LEVEL", "info").lower(),
        choices=["debug", "info", "warning", "error"],
    )

    args = parser.parse_args()

    # read by Config in the server process, including reload workers
    if args.providers:
        os.environ["SUGGESTION_PROVIDERS_FILE"] = os.path.abspath(args.providers)
    os.environ["LOG_LEVEL"] = args.log_level.upper()

    uvicorn.run(
        "server.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
    )
