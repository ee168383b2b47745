import subprocess
import sys
import os


def run_backend():
    port = os.getenv("PORT", "3333")
    print(f"Starting backend server on port {port}...")
    return subprocess.Popen([
        sys.executable, "-m", "uvicorn",
        "finance_tracker.api:app",
        "--host", os.getenv("HOST", "0.0.0.0"),
        "--port", port,
        "--reload"
    ])


def main():
    server = run_backend()
    server.wait()


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\nShutting down server...")
        sys.exit(0)
