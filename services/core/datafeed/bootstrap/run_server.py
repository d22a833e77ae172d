"""
Launcher for the UDF datafeed.

Probes ports upward from the configured one until a free port is found, then
serves the FastAPI app on it.

Usage:
    python -m datafeed.bootstrap.run_server
    python -m datafeed.bootstrap.run_server --port 9000 --host 127.0.0.1
"""

import argparse
import socket

import uvicorn

from datafeed.config import get_settings


def parse_args():
    """Parse command-line arguments."""
    settings = get_settings()
    parser = argparse.ArgumentParser(description="UDF Datafeed server")
    parser.add_argument(
        "--host",
        default=settings.host,
        help=f"Interface to bind (default: {settings.host})"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.port,
        help=f"First port to try (default: {settings.port})"
    )
    parser.add_argument(
        "--max_attempts",
        type=int,
        default=100,
        help="How many consecutive ports to probe (default: 100)"
    )
    return parser.parse_args()


def find_free_port(host: str, first_port: int, max_attempts: int = 100) -> int:
    """
    Return the first port >= first_port that can be bound on host.

    Raises:
        RuntimeError: if no port in the probed range is free
    """
    for port in range(first_port, first_port + max_attempts):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            try:
                sock.bind((host, port))
            except OSError:
                continue
            return port
    raise RuntimeError(f"No free port in {first_port}..{first_port + max_attempts - 1}")


def main():
    args = parse_args()
    port = find_free_port(args.host, args.port, args.max_attempts)

    print(f"Datafeed running at\n => http://localhost:{port}/\nCTRL + C to shutdown")
    uvicorn.run("datafeed.main:app", host=args.host, port=port)


if __name__ == "__main__":
    main()
