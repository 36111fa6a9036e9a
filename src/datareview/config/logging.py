"""Shared logging helpers for the data review jobs."""

from __future__ import annotations

import logging


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger once with defaults suited to scheduled jobs.

    Progress lines and warnings go to stderr so that stdout stays free for the
    issue body fallback. Pass ``force=True`` to reconfigure during tests.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    # httpx logs every request at INFO; one line per probed website is noise here.
    logging.getLogger("httpx").setLevel(logging.WARNING)
