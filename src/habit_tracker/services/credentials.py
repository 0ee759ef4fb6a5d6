"""Bearer credential passed through to remote backends."""

import logging
from dataclasses import dataclass

from habit_tracker.services.sources import LocalCache

logger = logging.getLogger(__name__)


@dataclass
class CredentialStore:
    """Resolves the credential from settings, then from the local cache slot."""

    cache: LocalCache
    storage_key: str
    configured: str | None = None

    def get(self) -> str | None:
        """Return the active credential, if any."""
        if self.configured:
            return self.configured
        try:
            cached = self.cache.get_item(self.storage_key)
        except (OSError, ValueError):
            logger.warning("Credential slot is unreadable", exc_info=True)
            return None
        return cached or None

    def set(self, credential: str) -> None:
        """Persist a credential in the local cache slot."""
        self.cache.set_item(self.storage_key, credential.strip())
