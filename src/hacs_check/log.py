from __future__ import annotations

import logging
import os
import sys
from typing import TextIO

_PACKAGE_LOGGER = "hacs_check"

# GitHub Actions workflow commands, keyed by record level
_WORKFLOW_COMMANDS = {
    logging.DEBUG: "::debug::",
    logging.WARNING: "::warning::",
    logging.ERROR: "::error::",
    logging.CRITICAL: "::error::",
}


class ActionsFormatter(logging.Formatter):
    """Formats records as GitHub Actions workflow commands when on a runner.

    Error records become ``::error::`` annotations, which is what marks the
    step as failed in the Actions UI. Outside of Actions the level name is
    used as a plain prefix.
    """

    def __init__(self, *, actions: bool | None = None) -> None:
        super().__init__("%(message)s")
        if actions is None:
            actions = os.environ.get("GITHUB_ACTIONS", "").lower() == "true"
        self.actions = actions

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if not self.actions:
            return f"{record.levelname:<8} {message}"
        command = _WORKFLOW_COMMANDS.get(record.levelno, "")
        if command:
            # workflow commands are single line, escape per the runner's rules
            message = (
                message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
            )
        return f"{command}{message}"


def configure_logging(
    level: str | int = logging.INFO,
    *,
    stream: TextIO | None = None,
    actions: bool | None = None,
) -> logging.Logger:
    logger = logging.getLogger(_PACKAGE_LOGGER)
    if isinstance(level, str):
        level = level.upper()
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(ActionsFormatter(actions=actions))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
