"""Business services package."""

from src.services.onboarding_service import HotelOnboardingService, OnboardingError

__all__ = [
    "HotelOnboardingService",
    "OnboardingError",
]
