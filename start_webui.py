#!/usr/bin/env python3
"""
Startup script for Media Organizer Web UI
"""

import uvicorn
import sys
import socket
import argparse

from logger import setup_logging


def is_port_in_use(port: int) -> bool:
    """Check if a port is already in use"""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        return s.connect_ex(('localhost', port)) == 0


def find_free_port(start_port: int = 8000, max_attempts: int = 10) -> int:
    """Find a free port starting from start_port"""
    for port in range(start_port, start_port + max_attempts):
        if not is_port_in_use(port):
            return port
    raise RuntimeError(f"Could not find a free port in range {start_port}-{start_port + max_attempts - 1}")


def main():
    parser = argparse.ArgumentParser(description="Start Media Organizer Web UI")
    parser.add_argument("--port", type=int, default=8000, help="Port to run the server on (default: 8000)")
    parser.add_argument("--host", type=str, default="0.0.0.0", help="Host to bind to (default: 0.0.0.0)")
    parser.add_argument("--config", help="Path to config.yaml")
    parser.add_argument("--log-file", help="Also write logs to this file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    parser.add_argument(
        "--auto-port",
        action="store_true",
        help="Automatically find a free port if the specified port is in use"
    )
    args = parser.parse_args()

    port = args.port
    if is_port_in_use(port):
        if args.auto_port:
            port = find_free_port(port)
            print(f"Port {args.port} is in use, using port {port} instead")
        else:
            print(f"ERROR: Port {port} is already in use!")
            print(f"\nOptions:")
            print(f"  1. Use a different port:")
            print(f"     python start_webui.py --port 8001")
            print(f"  2. Auto-find a free port:")
            print(f"     python start_webui.py --auto-port")
            sys.exit(1)

    setup_logging(args.log_file, args.verbose)

    # Imported after logging is configured
    from webui.main import create_app

    print("Starting Media Organizer Web UI...")
    print(f"Backend API: http://localhost:{port}")
    print(f"API Docs: http://localhost:{port}/docs")
    print("\nPress Ctrl+C to stop the server")

    uvicorn.run(create_app(config_path=args.config), host=args.host, port=port)


if __name__ == "__main__":
    main()
