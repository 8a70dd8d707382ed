#!/usr/bin/env python3
"""
Development server startup script for the medical report analyzer.
Checks configuration and starts the FastAPI service.
"""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

import uvicorn

from medreport.utils.config import settings


def check_environment():
    """Check if the inference service is configured."""
    print(" Checking environment...")

    if not settings.gemini_api_key:
        print("[ERROR] GEMINI_API_KEY is not set!")
        print("   Analyses will fail until an API key is configured in .env.")
        return False

    if sys.version_info < (3, 10):
        print(f"[ERROR] Python 3.10+ required, found {sys.version}")
        return False

    print(f"[OK] Using model {settings.gemini_model}")
    return True


async def run_service_async(
    host: str = "0.0.0.0",
    port: int = 8000,
    reload: bool = True,
    log_level: str = "info",
):
    """Run FastAPI service safely within an existing event loop."""
    logger = logging.getLogger(__name__)
    logger.info(f"Starting medical report analyzer on {host}:{port}")
    logger.info(f"Reload: {reload}")

    config_uvicorn = uvicorn.Config(
        "medreport.api.main:app",
        host=host,
        port=port,
        log_level=log_level,
        reload=reload,
    )
    server = uvicorn.Server(config_uvicorn)
    await server.serve()


def parse_arguments():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Medical report analyzer development server")
    parser.add_argument("--host", default=settings.host, help="Host to bind to")
    parser.add_argument("--port", type=int, default=settings.port, help="Port to bind to")
    parser.add_argument(
        "--production", action="store_true", help="Run in production mode (no reload)"
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level.lower(),
        choices=["debug", "info", "warning", "error"],
        help="Log level",
    )
    parser.add_argument(
        "--skip-checks", action="store_true", help="Skip the environment check"
    )
    return parser.parse_args()


def main():
    """Main startup function."""
    args = parse_arguments()

    print(" Medical Report Analyzer Development Server")
    print("=" * 60)
    print(f"Mode: {'Production' if args.production else 'Development'}")
    print(f"Host: {args.host}")
    print(f"Port: {args.port}")
    print(f"Log Level: {args.log_level}")
    print("-" * 60)

    os.chdir(Path(__file__).parent)

    if not args.skip_checks:
        check_environment()

    try:
        asyncio.run(
            run_service_async(
                host=args.host,
                port=args.port,
                reload=not args.production,
                log_level=args.log_level,
            )
        )
    except KeyboardInterrupt:
        print("\nServer stopped")
    except Exception as e:
        print(f"[ERROR] Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
