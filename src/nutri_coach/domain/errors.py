"""Domain errors."""


class NutriCoachError(Exception):
    """Base class for user-facing domain errors."""


class ProfileValidationError(NutriCoachError):
    """Raised when biometric input is missing or invalid."""


class WeightValidationError(NutriCoachError):
    """Raised when a weight entry is not a positive number."""


class MealInputError(NutriCoachError):
    """Raised when a meal cannot be logged from the given input."""
