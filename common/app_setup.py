"""
Logging and console output shared by the repoimport CLI and the mock store daemon.

Functions:
    setup_logging      - Configure the root logger and return it.
    set_print_logger   - Choose the logger used by print_and_log and print_error.
    monkeypatch_print  - Route built-in print through rich.
    print_and_log      - Print a message and log it at info level.
    print_error        - Print a message in red on stderr and log it at error level.
"""

import builtins
import logging
import logging.handlers
import os
import sys
from typing import Optional

from rich import print as rich_print
from rich.logging import RichHandler

SYSLOG_ADDRESS = "/dev/log"

# Logger behind print_and_log and print_error
_print_logger: Optional[logging.Logger] = None


def _level(loglevel: int | str) -> int:
    if isinstance(loglevel, str):
        return getattr(logging, loglevel.upper(), logging.INFO)
    return loglevel


def _daemon_handler(app_name: str) -> logging.Handler:
    try:
        handler: logging.Handler = logging.handlers.SysLogHandler(address=SYSLOG_ADDRESS)
    except OSError as e:
        # no syslog socket (containers, macOS): fall back to stderr
        print(f"Syslog unavailable for {app_name}, logging to stderr: {e}", file=sys.stderr)
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(f'%(asctime)s %(levelname)s %(process)d [{app_name}] %(message)s'))
    return handler


def _file_handler(app_name: str, logfile: Optional[str]) -> logging.Handler:
    if logfile is None:
        log_dir = os.path.expanduser(f"~/.{app_name}")
        os.makedirs(log_dir, exist_ok=True)
        logfile = os.path.join(log_dir, "log.txt")
    handler = logging.FileHandler(logfile)
    handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s %(process)d %(name)s %(message)s'))
    return handler


def setup_logging(app_name: str = "repoimport", daemon: bool = False, loglevel: int | str = logging.INFO,
                  logfile: Optional[str] = None, console: bool = False) -> logging.Logger:
    """
    Set up the root logger.
    - daemon=True logs to syslog, or to stderr when syslog is unavailable.
    - Otherwise logs go to ``logfile``, by default ~/.<app_name>/log.txt.
    - console=True also echoes records to the terminal through rich.
    ``loglevel`` is a logging constant or a level name such as "DEBUG".
    """
    logger = logging.getLogger()
    logger.setLevel(_level(loglevel))
    for h in logger.handlers[:]:
        logger.removeHandler(h)

    logger.addHandler(_daemon_handler(app_name) if daemon else _file_handler(app_name, logfile))
    if console and not daemon:
        logger.addHandler(RichHandler(show_path=False))
    set_print_logger(logger)
    logger.debug(f"Logger initialized for {app_name}")
    return logger


def set_print_logger(logger: logging.Logger):
    """Set the logger used by print_and_log and print_error."""
    global _print_logger
    _print_logger = logger


def monkeypatch_print():
    """Replace built-in print with rich.print (markup, no logging)."""
    builtins.print = rich_print


def print_and_log(message: str, **kwargs):
    print(message, **kwargs)
    if _print_logger is not None:
        _print_logger.info(message)


def print_error(message: str, **kwargs):
    print(f'[bold red]{message}[/bold red]', file=sys.stderr, **kwargs)
    if _print_logger is not None:
        _print_logger.error(message)
