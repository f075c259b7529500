#!/usr/bin/env python3
"""
Quick start script for the Genium API server.

Defaults come from the application settings (.env / environment).

Usage:
    python run.py
    python run.py --port 8080
    python run.py --no-reload --memory
"""

import argparse
import os

import uvicorn

from genium.config import get_settings


def main():
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Run the Genium broker assistant API")
    parser.add_argument("--host", default=settings.HOST, help=f"Bind address (default: {settings.HOST})")
    parser.add_argument("--port", type=int, default=settings.PORT, help=f"Port (default: {settings.PORT})")
    parser.add_argument("--no-reload", action="store_true", help="Disable auto-reload even when DEBUG is set")
    parser.add_argument("--memory", action="store_true", help="Keep the unit catalogue in an in-process Qdrant collection")

    args = parser.parse_args()
    reload = settings.DEBUG and not args.no_reload

    if args.memory:
        # Read by the reloaded worker process as well
        os.environ["QDRANT_USE_MEMORY"] = "true"

    print("=" * 60)
    print("  Genium - WhatsApp Broker Assistant")
    print("=" * 60)
    print(f"\n  Listening on http://{args.host}:{args.port}")
    print(f"  Webhook: http://{args.host}:{args.port}/webhook/whatsapp")
    print(f"  API Docs: http://localhost:{args.port}/docs")
    print(f"  Vector store: {'in-memory' if args.memory or settings.QDRANT_USE_MEMORY else settings.QDRANT_URL or settings.QDRANT_HOST}")
    print(f"  Auto-reload: {'enabled' if reload else 'disabled'}")
    print("\n" + "=" * 60 + "\n")

    uvicorn.run(
        "genium.main:app",
        host=args.host,
        port=args.port,
        reload=reload,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
