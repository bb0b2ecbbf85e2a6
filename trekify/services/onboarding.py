from __future__ import annotations

from dataclasses import dataclass
from typing import Any

"""Static onboarding payload served to first-run clients."""

__all__ = [
    "OnboardingSlide",
    "onboarding_payload",
    "onboarding_slides",
]


@dataclass(frozen=True)
class OnboardingSlide:
    path: str  # 動画または画像の URL
    is_video: bool
    title: str
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "isVideo": self.is_video,
            "title": self.title,
            "description": self.description,
        }


_SLIDES: tuple[OnboardingSlide, ...] = (
    OnboardingSlide(
        path="https://res.cloudinary.com/dvnr3ouix/video/upload/v1754843270/welcome_s2tezu.mp4",
        is_video=True,
        title="Welcome to Trekify!",
        description=(
            "Your personal guide to the world of trekking. "
            "Let's find the perfect adventure for you."
        ),
    ),
    OnboardingSlide(
        path="https://res.cloudinary.com/dvnr3ouix/image/upload/v1754843277/difficulty_g4hwbk.jpg",
        is_video=False,
        title="Discover Your Path",
        description="Explore treks of all types, from serene lakes to challenging mountain forts.",
    ),
    OnboardingSlide(
        path="https://res.cloudinary.com/dvnr3ouix/image/upload/v1754843275/type_urd4zs.jpg",
        is_video=False,
        title="Track Your Journey",
        description="Save your favorite treks to a wishlist and mark the ones you've conquered.",
    ),
)


def onboarding_slides() -> tuple[OnboardingSlide, ...]:
    return _SLIDES


def onboarding_payload() -> list[dict[str, Any]]:
    """Slides in display order, serialized for the API."""
    return [s.to_dict() for s in _SLIDES]
