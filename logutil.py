import os
import sys
import threading
import config

LEVELS = {"DEBUG": 10, "INFO": 20, "WARN": 30, "ERROR": 40}


def enabled(level):
    threshold = LEVELS.get(str(getattr(config, "LOG_LEVEL", "INFO")).upper(), 20)
    return LEVELS.get(level, 20) >= threshold


def log(scope, msg, level="INFO"):
    if not enabled(level):
        return
    pid = os.getpid()
    thread = threading.current_thread().name
    text = f"[{level} pid{pid} thr{thread} {scope}] {msg}"
    use_color = getattr(config, "LOG_COLOR", True) and os.getenv("NO_COLOR") is None
    if use_color:
        if level == "ERROR":
            text = f"\x1b[31m{text}\x1b[0m"
        elif thread != "MainThread":
            # Patch worker thread.
            text = f"\x1b[32m{text}\x1b[0m"
    stream = sys.stderr if level in ("WARN", "ERROR") else sys.stdout
    print(text, file=stream)
