"""Compensating rollback after a failed upgrade."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from up_cli.services.uxp.exceptions import RollbackFailedError

if TYPE_CHECKING:
    from up_cli.services.uxp.interfaces import ReleaseStore

logger = structlog.get_logger()


class RollbackCoordinator:
    """Rolls a release back to its previous revision.

    Exactly one attempt is made. Retrying against a store in an unknown
    state can compound the damage.
    """

    def __init__(self, store: ReleaseStore, log: structlog.BoundLogger | None = None) -> None:
        self._store = store
        self._log = log or logger

    def rollback(self, release_name: str, upgrade_error: BaseException | None = None) -> None:
        """Roll back ``release_name``.

        Args:
            release_name: The release to roll back.
            upgrade_error: The failure that triggered the rollback, kept on
                the raised error for the caller.

        Raises:
            RollbackFailedError: The rollback itself failed.
        """
        self._log.warning("rolling_back_failed_upgrade", release=release_name)
        try:
            self._store.rollback(release_name)
        except Exception as e:
            self._log.error("rollback_failed", release=release_name, error=str(e))
            raise RollbackFailedError(upgrade_error, e) from e
        self._log.info("rollback_complete", release=release_name)
