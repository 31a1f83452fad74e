"""Thin wrapper around the external audio tools."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence

LOGGER = logging.getLogger(__name__)


def run_command(cmd: Sequence[str], *, timeout_s: float | None = None) -> subprocess.CompletedProcess[str]:
    """Run ``cmd`` to completion and capture its output.

    Launch failures (``OSError``) and ``subprocess.TimeoutExpired`` propagate;
    callers decide whether they are soft (discovery) or reported (switching).
    """
    LOGGER.debug("Running %s", " ".join(cmd))
    result = subprocess.run(
        list(cmd),
        check=False,
        capture_output=True,
        text=True,
        timeout=timeout_s,
    )
    LOGGER.debug("%s exited with %s", cmd[0], result.returncode)
    return result
