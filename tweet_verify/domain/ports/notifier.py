"""Push notification interface."""

from typing import Protocol

from pydantic import BaseModel, Field

from ..models.verification import VerdictLabel

SEVERITY_TAGS = {
    VerdictLabel.TRUE.value: "white_check_mark",
    VerdictLabel.FALSE.value: "x",
}
DEFAULT_SEVERITY_TAG = "warning"


def severity_tag_for(label: str) -> str:
    """Map a representative verdict label to a notification tag."""
    return SEVERITY_TAGS.get(label, DEFAULT_SEVERITY_TAG)


class Notification(BaseModel):
    """A push message about a finished fact-check."""

    topic: str = Field(..., description="Notification channel chosen by the requester")
    title: str
    message: str
    click_url: str = Field(..., alias="clickUrl")
    tags: str = Field(default=DEFAULT_SEVERITY_TAG, description="Coarse severity tag")

    class Config:
        """Pydantic model configuration."""
        frozen = True
        populate_by_name = True

    @classmethod
    def for_label(
        cls,
        topic: str,
        title: str,
        message: str,
        click_url: str,
        label: str,
    ) -> "Notification":
        """Build a notification whose tag is derived from ``label``."""
        return cls(
            topic=topic,
            title=title,
            message=message,
            click_url=click_url,
            tags=severity_tag_for(label),
        )


class Notifier(Protocol):
    """Fire-and-forget notification transport.

    ``send`` logs and swallows delivery failures.
    """

    async def send(self, notification: Notification) -> None:
        """Deliver a notification."""
        ...

    async def shutdown(self) -> None:
        """Release network resources."""
        ...
