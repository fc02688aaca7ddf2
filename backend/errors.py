"""Mapping of unexpected failures to generic 500 responses."""

from __future__ import annotations

import logging

from fastapi import HTTPException

import config_env

logger = logging.getLogger(__name__)


def server_error(message: str, exc: Exception) -> HTTPException:
    """Log *exc* and build a 500 whose detail only carries the exception text
    when EXPOSE_ERRORS is enabled."""
    logger.error("%s: %s", message, exc, exc_info=exc)
    detail = f"{message}: {exc}" if config_env.EXPOSE_ERRORS else message
    return HTTPException(status_code=500, detail=detail)
