"""
Run the reqflow FastAPI application with uvicorn.

Usage:
    python run.py
    python run.py --reload          # Development mode with auto-reload
    python run.py --port 8080       # Custom port
    python run.py --log-level debug
"""
import argparse
import uvicorn


def main():
    parser = argparse.ArgumentParser(description="Run the reqflow API server")
    parser.add_argument("--host", type=str, default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to (default: 8000)")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload for development")
    parser.add_argument(
        "--log-level",
        type=str,
        default="info",
        choices=["critical", "error", "warning", "info", "debug"],
        help="uvicorn log level (application level comes from LOG_LEVEL)"
    )

    args = parser.parse_args()

    print(f"Starting reqflow API server on {args.host}:{args.port} (reload={args.reload})")

    uvicorn.run(
        "reqflow.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
