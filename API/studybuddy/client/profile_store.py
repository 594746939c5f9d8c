import json
from pathlib import Path

from studybuddy.core.logging import DOMAIN_PROFILE, get_domain_logger
from studybuddy.core.settings import settings
from studybuddy.schemas.chat import LearnerProfile, LearningStyle

logger = get_domain_logger(__name__, DOMAIN_PROFILE)

PROFILE_RECORD_NAME = "studentData"


class ProfileNotFoundError(LookupError):
    """No learner profile has been registered on this device."""


class ProfileStore:
    """The single client-local ``studentData`` record, kept as a JSON file."""

    def __init__(self, base_dir: str | Path | None = None):
        self.base = Path(base_dir or settings.client_data_dir)
        self.record_file = self.base / f"{PROFILE_RECORD_NAME}.json"

    def load(self) -> LearnerProfile | None:
        if not self.record_file.exists():
            return None
        try:
            return LearnerProfile.model_validate(json.loads(self.record_file.read_text(encoding="utf-8")))
        except ValueError as exc:
            logger.warning("Ignoring unreadable profile record %s: %s", self.record_file, exc)
            return None

    def require(self) -> LearnerProfile:
        profile = self.load()
        if profile is None:
            raise ProfileNotFoundError(PROFILE_RECORD_NAME)
        return profile

    def save(self, profile: LearnerProfile) -> None:
        self.base.mkdir(parents=True, exist_ok=True)
        payload = profile.model_dump(mode="json", by_alias=True)
        self.record_file.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        logger.info("Profile saved | style=%s", profile.learning_style.value)

    def update_learning_style(self, style: LearningStyle) -> LearnerProfile | None:
        """Overwrite only the learning style; does nothing when no profile exists."""
        profile = self.load()
        if profile is None:
            return None
        updated = profile.model_copy(update={"learning_style": LearningStyle(style)})
        self.save(updated)
        return updated

    def clear(self) -> None:
        self.record_file.unlink(missing_ok=True)
