"""消費カロリーの推定とユーザー情報の検証。"""

from __future__ import annotations

import math

from pedometer_stats.model import UserProfile

# Walking METs coefficient: weight (kg) x distance (km) x 1.05.
WALKING_COEFFICIENT = 1.05

INVALID_USER_MESSAGE = "正しく入力してください"


class InvalidUserProfileError(ValueError):
    """Raised when a nickname or body weight is not acceptable."""

    def __init__(self, message: str = INVALID_USER_MESSAGE) -> None:
        super().__init__(message)
        self.message = message


def estimate_kcal(distance_m: float | None, weight_kg: float | None) -> float | None:
    """Estimate walking energy expenditure.

    Args:
        distance_m: Distance walked in meters, or None when not measured.
        weight_kg: Body weight in kilograms, or None when unknown.

    Returns:
        Kilocalories, or None when either input is missing. None is distinct
        from ``0.0``: it means there was nothing to estimate from.
    """
    if distance_m is None or weight_kg is None:
        return None
    return weight_kg * (distance_m / 1000.0) * WALKING_COEFFICIENT


def create_user(nickname: str, raw_weight: str | float) -> UserProfile:
    """Validate entry-form input and build a user profile.

    Raises:
        InvalidUserProfileError: If the nickname is blank or the weight is not
            a positive number.
    """
    name = nickname.strip() if isinstance(nickname, str) else ""
    if not name:
        raise InvalidUserProfileError()
    try:
        weight = float(raw_weight)
    except (TypeError, ValueError):
        raise InvalidUserProfileError() from None
    if not math.isfinite(weight) or weight <= 0:
        raise InvalidUserProfileError()
    return UserProfile(nickname=name, weight_kg=weight)
