from __future__ import annotations

from studybuddy.client.profile_store import ProfileStore
from studybuddy.core.logging import DOMAIN_PROFILE, get_domain_logger
from studybuddy.schemas.chat import LearnerProfile
from studybuddy.schemas.registration import RegistrationForm

logger = get_domain_logger(__name__, DOMAIN_PROFILE)


def register(store: ProfileStore, *, name: str, age, learning_style: str | None) -> LearnerProfile:
    """Validate the registration form and store the resulting profile.

    Raises pydantic.ValidationError carrying the form messages when a field is invalid.
    """
    form = RegistrationForm(name=name, age=age, learning_style=learning_style)
    profile = form.to_profile()
    store.save(profile)
    logger.info("Learner registered | age=%d style=%s", profile.age, profile.learning_style.value)
    return profile


def form_errors(exc) -> dict[str, str]:
    """Map a ValidationError to ``{field: message}`` for display next to the inputs."""
    errors: dict[str, str] = {}
    for err in exc.errors():
        field = str(err["loc"][0]) if err.get("loc") else "form"
        message = str(err.get("msg", ""))
        errors[field] = message.removeprefix("Value error, ")
    return errors
