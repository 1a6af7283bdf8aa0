"""General helper functions used across the application."""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from .error_handler import InvalidUserIdError


def user_data_dir(root: Path, user_id: str) -> Path:
    """Return ``root / user_id``, refusing ids that would leave ``root``.

    User ids arrive as query parameters and become file names, so they
    must name a single entry directly under ``root``.

    Raises
    ------
    InvalidUserIdError
        If ``user_id`` is empty, contains a path separator or ``..``, or
        does not resolve to an entry directly under ``root``.
    """
    unsafe = not user_id or "/" in user_id or "\\" in user_id or ".." in user_id or user_id == "."
    if unsafe or (root / user_id).resolve().parent != root.resolve():
        logger.warning("Rejected user id {!r}", user_id)
        raise InvalidUserIdError(user_id)
    return root / user_id
