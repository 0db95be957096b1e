import argparse

import uvicorn


def main():
    parser = argparse.ArgumentParser(description="Local Landmarks proxy server")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--reload", action="store_true", help="Reload on code changes (development)")
    args = parser.parse_args()

    # log_config=None keeps uvicorn from replacing the structlog setup
    uvicorn.run("landmarks.main:app", host=args.host, port=args.port, reload=args.reload, log_config=None)


if __name__ == "__main__":
    main()
