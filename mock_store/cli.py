"""
This file is the entry point for the 'mockstore' command-line tool.
Run 'mockstore' in your shell to start, list and stop mock store daemons.
"""
import json
import os
import signal
import subprocess
import sys

import httpx
import psutil
import typer

from common.app_setup import setup_logging, monkeypatch_print, print_and_log, print_error

DAEMON_MODULE = "mock_store.daemon"

app = typer.Typer(help="Manage mock content store daemons.")

# Set up logging for the CLI (not daemon)
logger = setup_logging(app_name="mockstore", daemon=False)
monkeypatch_print()


PORT_EVENTS = ("port_selected", "port_used")


def _announced_port(stream, attempts: int = 10) -> int | None:
    """Read the daemon's stdout until it announces its port, or give up."""
    for _ in range(attempts):
        line = stream.readline()
        if not line:
            return None
        try:
            msg = json.loads(line)
        except json.JSONDecodeError:
            continue
        if msg.get("event") in PORT_EVENTS:
            return int(msg["port"])
    return None


@app.command()
def start_server(port: int = typer.Option(None, help="Port to run the server on (auto if not set)")):
    """Start a mock store daemon in the background."""
    cmd = [sys.executable, '-m', DAEMON_MODULE]
    if port:
        cmd += ["--port", str(port)]
    try:
        proc = subprocess.Popen(cmd, stdout=subprocess.PIPE, stderr=subprocess.DEVNULL, text=True, close_fds=True)
    except OSError as e:
        print_error(f"Failed to start mockstored: {e}")
        return
    selected = _announced_port(proc.stdout) or port
    print_and_log(f"Started mockstored with PID {proc.pid} on port {selected or 'auto'}.")


def _daemons():
    """Yield (pid, listening ports) for every running mock store daemon."""
    for proc in psutil.process_iter(['pid', 'cmdline']):
        try:
            cmdline = proc.info['cmdline'] or []
            if DAEMON_MODULE not in ' '.join(cmdline):
                continue
            ports = [c.laddr.port for c in proc.net_connections(kind='inet') if c.status == psutil.CONN_LISTEN]
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            continue
        yield proc.pid, ports


@app.command()
def list_servers():
    """List running mock store daemons and their listening ports."""
    found = False
    for pid, ports in _daemons():
        found = True
        print_and_log(f"PID: {pid} | Ports: {', '.join(map(str, ports)) or 'none'}")
    if not found:
        print_and_log("No running mockstored daemons found.")


@app.command()
def stop_server(port: int = typer.Argument(..., help="Port of the server")):
    """Gracefully stop a running server via REST API (localhost only)."""
    url = f"http://127.0.0.1:{port}/shutdown"
    try:
        response = httpx.post(url, timeout=5)
    except httpx.HTTPError as e:
        print_error(f"Error contacting server at 127.0.0.1:{port}: {e}")
        return
    if response.status_code == 200:
        print_and_log(f"Server at 127.0.0.1:{port} stopped gracefully.")
    else:
        print_error(f"Failed to stop server at 127.0.0.1:{port}: {response.status_code} {response.text}")


@app.command()
def kill_server(pid: int = typer.Argument(..., help="PID of the server process to kill")):
    """Force kill a running server by PID (sends SIGTERM)."""
    try:
        proc = psutil.Process(pid)
        cmdline = ' '.join(proc.cmdline())
        if DAEMON_MODULE not in cmdline:
            print_error(f"Refusing to kill PID {pid}: not a mock store daemon (cmdline: {cmdline})")
            return
        os.kill(pid, signal.SIGTERM)
        print_and_log(f"Sent SIGTERM to process {pid}.")
    except (psutil.Error, OSError) as e:
        print_error(f"Failed to kill process {pid}: {e}")


if __name__ == "__main__":
    app()
