"""Child process handling for git calls: process groups, timeouts, Ctrl-C.

Each git call runs in its own process group (a new session on POSIX, a new
process group on Windows). Killing the group also takes down the ssh and
credential helpers git spawned, which otherwise keep the output pipes open
after git itself is gone.
"""

import os
import platform
import signal
import subprocess
import threading
from typing import Any, Dict

IS_WINDOWS = platform.system() == "Windows"

# seconds to wait for a signalled process group before escalating
KILL_GRACE = 2.0

# pid -> process; RLock so the SIGINT handler can re-enter on the main thread
_running: Dict[int, subprocess.Popen] = {}
_running_lock = threading.RLock()
_stop_event = threading.Event()


class SyncCancelled(Exception):
    """Raised between repositories once the operator asked to stop."""


def hidden_window_kwargs() -> Dict[str, Any]:
    """Popen kwargs that keep a console window from flashing up on Windows."""
    if not IS_WINDOWS:
        return {}

    startupinfo = subprocess.STARTUPINFO()
    startupinfo.dwFlags |= subprocess.STARTF_USESHOWWINDOW
    startupinfo.wShowWindow = subprocess.SW_HIDE
    return {
        "startupinfo": startupinfo,
        "creationflags": subprocess.CREATE_NO_WINDOW,
    }


def _group_kwargs() -> Dict[str, Any]:
    if IS_WINDOWS:
        kwargs = hidden_window_kwargs()
        kwargs["creationflags"] |= subprocess.CREATE_NEW_PROCESS_GROUP
        return kwargs
    return {"start_new_session": True}


def start_process(command, **kwargs) -> subprocess.Popen:
    """Start ``command`` as the leader of a new process group and register it."""
    popen_kwargs = dict(kwargs)
    for key, value in _group_kwargs().items():
        popen_kwargs.setdefault(key, value)

    process = subprocess.Popen(command, **popen_kwargs)
    with _running_lock:
        _running[process.pid] = process
    return process


def forget_process(process: subprocess.Popen) -> None:
    with _running_lock:
        _running.pop(process.pid, None)


def _signal_group(pgid: int, signum: int) -> None:
    try:
        os.killpg(pgid, signum)
    except (ProcessLookupError, PermissionError):
        # group already gone
        pass


def kill_process_tree(process: subprocess.Popen, grace: float = KILL_GRACE) -> None:
    """Stop a process and everything in its group.

    The group is signalled even if the leader already exited: its children
    may still be alive and holding the pipes.
    """
    if IS_WINDOWS:
        subprocess.run(
            ["taskkill", "/F", "/T", "/PID", str(process.pid)],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
            **hidden_window_kwargs(),
        )
        return

    _signal_group(process.pid, signal.SIGTERM)
    try:
        process.wait(timeout=grace)
    except subprocess.TimeoutExpired:
        pass
    _signal_group(process.pid, signal.SIGKILL)
    process.wait()


def kill_running_processes() -> None:
    with _running_lock:
        processes = list(_running.values())

    for process in processes:
        kill_process_tree(process)
        forget_process(process)


def request_shutdown() -> None:
    """Mark the run as canceled and stop the git call in flight.

    Safe to call from a SIGINT handler: the registry lock is reentrant and
    nothing here allocates locks of its own.
    """
    _stop_event.set()
    kill_running_processes()


def clear_shutdown_request() -> None:
    _stop_event.clear()


def is_shutdown_requested() -> bool:
    return _stop_event.is_set()


def raise_if_shutdown_requested() -> None:
    """Cooperative cancellation point between repositories."""
    if is_shutdown_requested():
        raise SyncCancelled("run canceled by operator")
