from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from idlecat.shared.paths import ensure_parent_dir


def setup_logging(verbosity: int = 0, log_file: Optional[str] = None) -> None:
    root = logging.getLogger()

    if root.handlers:
        return

    console_level = logging.WARNING
    if verbosity == 1:
        console_level = logging.INFO
    elif verbosity >= 2:
        console_level = logging.DEBUG
    root.setLevel(min(console_level, logging.INFO))

    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s - %(message)s")

    # stdout carries the relayed stream, so the console handler must stay on stderr.
    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    root.addHandler(ch)

    if log_file:
        path = Path(log_file).expanduser()
        ensure_parent_dir(path)
        fh = RotatingFileHandler(str(path), maxBytes=2_000_000, backupCount=3, encoding="utf-8")
        fh.setLevel(logging.INFO)
        fh.setFormatter(fmt)
        root.addHandler(fh)
