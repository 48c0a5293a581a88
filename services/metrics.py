"""Body composition and energy expenditure metrics.

BMI, body fat (U.S. Navy or Deurenberg 1991), BMR (Mifflin-St Jeor),
TDEE (FAO/WHO/UNU PAL tiers) and daily calorie targets.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Optional

from services.methods import DEURENBERG, NAVY, normalize_method_key

BODY_FAT_MIN = 5.0
BODY_FAT_MAX = 50.0

CUTTING_DEFICIT = 0.15
BULKING_SURPLUS = 0.10


class Sex(str, Enum):
    MALE = "male"
    FEMALE = "female"


class Goal(str, Enum):
    MAINTENANCE = "maintenance"
    BULKING = "bulking"
    CUTTING = "cutting"


class Focus(str, Enum):
    STRENGTH = "strength"
    HYPERTROPHY = "hypertrophy"


@dataclass(frozen=True)
class UserProfile:
    age: int
    sex: Sex
    height: float  # cm
    weight: float  # kg
    training_days: int
    goal: Goal
    focus: Focus
    neck: Optional[float] = None
    waist: Optional[float] = None
    hip: Optional[float] = None


@dataclass(frozen=True)
class TargetCalories:
    maintenance: int
    bulking: int
    cutting: int

    def for_goal(self, goal: Goal) -> int:
        return getattr(self, Goal(goal).value)


@dataclass(frozen=True)
class FitnessResult:
    bmi: float
    body_fat_percentage: float
    body_fat_method: str
    bmr: int
    tdee: int
    target_calories: TargetCalories

    def to_dict(self) -> dict[str, Any]:
        return {
            "bmi": self.bmi,
            "bodyFatPercentage": self.body_fat_percentage,
            "bodyFatMethod": self.body_fat_method,
            "bmr": self.bmr,
            "tdee": self.tdee,
            "targetCalories": {
                "maintenance": self.target_calories.maintenance,
                "bulking": self.target_calories.bulking,
                "cutting": self.target_calories.cutting,
            },
        }


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties away from zero for positive values."""
    return int(math.floor(value + 0.5))


def round_one_decimal(value: float) -> float:
    return float(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def _measured(value: Optional[float]) -> bool:
    # zero means the field was left blank
    return value is not None and value > 0


def calculate_bmi(weight: float, height: float) -> float:
    """
    Calculate Body Mass Index.

    Args:
        weight: Weight in kg
        height: Height in cm

    Returns:
        BMI rounded to one decimal
    """
    height_m = height / 100
    return round_one_decimal(weight / (height_m * height_m))


def navy_is_applicable(profile: UserProfile) -> bool:
    """Whether the Navy formula can be used for this profile.

    Neck and waist must be present (plus hip for women) and the log argument
    of the formula must be positive.
    """
    if not (_measured(profile.neck) and _measured(profile.waist)):
        return False
    if profile.sex == Sex.MALE:
        return profile.waist > profile.neck
    if not _measured(profile.hip):
        return False
    return (profile.waist + profile.hip) > profile.neck


def navy_body_fat(profile: UserProfile) -> float:
    """U.S. Navy circumference formula, unclamped.

    Callers must check navy_is_applicable() first.
    """
    if profile.sex == Sex.MALE:
        return 495 / (
            1.0324
            - 0.19077 * math.log10(profile.waist - profile.neck)
            + 0.15456 * math.log10(profile.height)
        ) - 450
    return 495 / (
        1.29579
        - 0.35004 * math.log10(profile.waist + profile.hip - profile.neck)
        + 0.22100 * math.log10(profile.height)
    ) - 450


def deurenberg_body_fat(bmi: float, age: int, sex: Sex) -> float:
    """Deurenberg (1991) population estimate from BMI, age and sex, unclamped."""
    is_male = 1 if sex == Sex.MALE else 0
    return (1.20 * bmi) + (0.23 * age) - (10.8 * is_male) - 5.4


def calculate_body_fat(profile: UserProfile, bmi: float) -> tuple[float, str]:
    """
    Estimate body fat percentage.

    Args:
        profile: User profile
        bmi: BMI already rounded to one decimal

    Returns:
        Tuple of (body fat % clamped to [5, 50] and rounded, method key)
    """
    if navy_is_applicable(profile):
        method = NAVY
        body_fat = navy_body_fat(profile)
    else:
        method = DEURENBERG
        body_fat = deurenberg_body_fat(bmi, profile.age, profile.sex)

    body_fat = max(BODY_FAT_MIN, min(BODY_FAT_MAX, body_fat))
    return round_one_decimal(body_fat), normalize_method_key(method)


def calculate_bmr(weight: float, height: float, age: int, sex: Sex) -> int:
    """
    Calculate Basal Metabolic Rate using Mifflin-St Jeor Equation.

    Args:
        weight: Weight in kg
        height: Height in cm
        age: Age in years
        sex: Sex.MALE or Sex.FEMALE

    Returns:
        BMR in kcal/day, rounded to the nearest integer
    """
    if sex == Sex.MALE:
        bmr = (10 * weight) + (6.25 * height) - (5 * age) + 5
    else:
        bmr = (10 * weight) + (6.25 * height) - (5 * age) - 161
    return round_half_up(bmr)


def activity_multiplier(training_days: int) -> float:
    """Physical Activity Level for the number of training days per week."""
    if training_days <= 1:
        return 1.40  # sedentary or light
    if training_days <= 3:
        return 1.55  # moderately active
    if training_days <= 5:
        return 1.70  # vigorously active
    return 1.85


def calculate_tdee(bmr: int, training_days: int) -> int:
    return round_half_up(bmr * activity_multiplier(training_days))


def calculate_target_calories(tdee: int) -> TargetCalories:
    """Maintenance at TDEE, ~15% deficit for cutting, ~10% surplus for bulking."""
    return TargetCalories(
        maintenance=tdee,
        bulking=tdee + round_half_up(tdee * BULKING_SURPLUS),
        cutting=tdee - round_half_up(tdee * CUTTING_DEFICIT),
    )


def calculate_fitness_metrics(profile: UserProfile) -> FitnessResult:
    """
    Calculate the complete set of fitness metrics for a profile.

    Inputs are assumed to be validated already; pathological values yield
    clamped output rather than errors.
    """
    bmi = calculate_bmi(profile.weight, profile.height)
    body_fat, method = calculate_body_fat(profile, bmi)
    bmr = calculate_bmr(profile.weight, profile.height, profile.age, profile.sex)
    tdee = calculate_tdee(bmr, profile.training_days)

    return FitnessResult(
        bmi=bmi,
        body_fat_percentage=body_fat,
        body_fat_method=method,
        bmr=bmr,
        tdee=tdee,
        target_calories=calculate_target_calories(tdee),
    )
