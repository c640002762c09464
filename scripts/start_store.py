import os
import signal
import subprocess
import sys
import time

# =========================
# Environment
# =========================
env = os.environ.copy()
env["PYTHONUNBUFFERED"] = "1"

APP = "recordkv.service.store_service:app"

BASE_CMD = [
    "uvicorn",
    "--host", "0.0.0.0",
    "--log-level", "info",
]


def start_store(port: str, snapshot_path: str = None):
    proc_env = dict(env)
    if snapshot_path:
        proc_env["SNAPSHOT_PATH"] = snapshot_path

    cmd = BASE_CMD + [APP, "--port", port]
    print(f"[START] store → {port} (snapshot={snapshot_path or 'memory'})")

    return subprocess.Popen(
        cmd,
        cwd=os.getcwd(),
        env=proc_env,
    )


def run(port: str, snapshot_path: str = None):
    proc = start_store(port, snapshot_path)
    try:
        while proc.poll() is None:
            time.sleep(1)
    except KeyboardInterrupt:
        print("\nStopping store...")
    finally:
        if proc.poll() is None:
            # SIGTERM lets the lifespan save the snapshot
            proc.send_signal(signal.SIGTERM)
            try:
                proc.wait(timeout=10)
            except subprocess.TimeoutExpired:
                proc.kill()
        print("Store stopped.")


# =========================
# CLI
# =========================
if __name__ == "__main__":
    if len(sys.argv) > 3 or (len(sys.argv) > 1 and sys.argv[1] in ("-h", "--help")):
        print("Usage:")
        print("  python scripts/start_store.py [port] [snapshot_path]")
        sys.exit(1)

    port = sys.argv[1] if len(sys.argv) > 1 else "9090"
    snapshot = sys.argv[2] if len(sys.argv) > 2 else None
    run(port, snapshot)
