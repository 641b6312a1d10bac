"""Deletion of unused files."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)


def delete_files(paths: Iterable[Path]) -> tuple[list[Path], dict[Path, str]]:
    """Delete every path; one failure never stops the rest.

    Returns (deleted, failures) where failures maps a path to its error text.
    """
    deleted: list[Path] = []
    failures: dict[Path, str] = {}
    for path in paths:
        try:
            path.unlink()
        except OSError as e:
            logger.error("Could not delete %s: %s", path, e)
            failures[path] = e.strerror or str(e)
            continue
        logger.info("[Deleted] %s", path)
        deleted.append(path)
    return deleted, failures


async def delete_files_async(paths: Iterable[Path]) -> tuple[list[Path], dict[Path, str]]:
    return await asyncio.to_thread(delete_files, list(paths))
