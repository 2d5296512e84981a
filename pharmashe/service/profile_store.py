# pharmashe/service/profile_store.py

"""Local JSON storage for the user health profile."""

import json
import logging
from dataclasses import asdict, fields
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pharmashe.core.domain import UserProfile

logger = logging.getLogger(__name__)


class ProfileStore:
    """Keeps a single UserProfile in a JSON file on this machine.

    A missing or unreadable file loads as an empty profile.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> UserProfile:
        if not self.path.exists():
            return UserProfile()

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError):
            logger.warning(
                "Stored profile could not be read", extra={"path": str(self.path)}
            )
            return UserProfile()

        if not isinstance(raw, dict):
            return UserProfile()

        known = {f.name for f in fields(UserProfile)}
        return UserProfile(
            **{k: str(v) for k, v in raw.items() if k in known and v is not None}
        )

    def save(self, profile: UserProfile, now: Optional[datetime] = None) -> UserProfile:
        """Writes the profile with saved_at set to the current UTC time."""
        stamped = UserProfile(**asdict(profile))
        stamped.saved_at = (now or datetime.now(timezone.utc)).isoformat()

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(asdict(stamped), f, indent=2)

        logger.info("Profile saved", extra={"path": str(self.path)})
        return stamped

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
            logger.info("Profile cleared", extra={"path": str(self.path)})
