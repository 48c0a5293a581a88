"""Server-side validation of the profile form.

Mirrors the limits shown on the form. Errors are returned as a
field -> message dict (Spanish, shown next to each input).
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from services.metrics import Focus, Goal, Sex, UserProfile

FIELD_LIMITS = {
    "age": (16, 99, "Edad entre 16 y 99."),
    "height": (120, 250, "Altura entre 120 y 250 cm."),
    "weight": (30, 300, "Peso entre 30 y 300 kg."),
}

MEASUREMENT_FIELDS = ("neck", "waist", "hip")
TRAINING_DAYS_RANGE = (0, 7)

NUMBER_ERROR = "Debe ser un número."
REQUIRED_ERROR = "Campo obligatorio."
NEGATIVE_ERROR = "No puede ser negativo."

NAVY_WARNING_MALE = (
    "Aviso: La medida de la cintura debe ser mayor que la del cuello para usar el método Navy. "
    "Se usará el método de respaldo."
)
NAVY_WARNING_FEMALE = (
    "Aviso: La suma de cintura y cadera debe ser mayor que el cuello para usar el método Navy. "
    "Se usará el método de respaldo."
)


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _to_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if number != number or number in (float("inf"), float("-inf")):
        return None
    return number


def validate_field(name: str, value: Any) -> str:
    """Return the error message for a single numeric field, or '' if valid."""
    if name in MEASUREMENT_FIELDS and _blank(value):
        return ""
    if _blank(value):
        return REQUIRED_ERROR

    number = _to_float(value)
    if number is None:
        return NUMBER_ERROR

    if name in FIELD_LIMITS:
        low, high, message = FIELD_LIMITS[name]
        if number < low or number > high:
            return message
    elif name in MEASUREMENT_FIELDS and number < 0:
        return NEGATIVE_ERROR
    return ""


def _choice(enum_cls, value: Any):
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        return None


def navy_warning(
    sex: Sex,
    neck: Optional[float],
    waist: Optional[float],
    hip: Optional[float] = None,
) -> Optional[str]:
    """Advisory shown when measurements are given but cannot feed the Navy formula."""
    if not waist or not neck:
        return None
    if sex == Sex.MALE:
        if waist > 0 and neck > 0 and waist <= neck:
            return NAVY_WARNING_MALE
        return None
    if not hip:
        return None
    if waist > 0 and neck > 0 and hip > 0 and (waist + hip) <= neck:
        return NAVY_WARNING_FEMALE
    return None


def parse_profile(data: Mapping[str, Any]) -> tuple[Optional[UserProfile], dict[str, str]]:
    """
    Validate raw form or JSON input and build a UserProfile.

    Args:
        data: Mapping with age, sex (or gender), height, weight, trainingDays
            (or training_days), goal, focus and optional neck, waist, hip

    Returns:
        Tuple of (profile or None, errors). The profile is None whenever
        errors is not empty.
    """
    errors: dict[str, str] = {}

    sex = _choice(Sex, data.get("sex", data.get("gender")))
    for name in ("age", "height", "weight", *MEASUREMENT_FIELDS):
        if name == "hip" and sex == Sex.MALE:
            continue  # dropped below
        message = validate_field(name, data.get(name))
        if message:
            errors[name] = message

    if sex is None:
        errors["sex"] = "Selecciona hombre o mujer."
    goal = _choice(Goal, data.get("goal"))
    if goal is None:
        errors["goal"] = "Objetivo no válido."
    focus = _choice(Focus, data.get("focus"))
    if focus is None:
        errors["focus"] = "Enfoque no válido."

    raw_days = data.get("trainingDays", data.get("training_days"))
    days = _to_float(raw_days)
    low, high = TRAINING_DAYS_RANGE
    if days is None or days != int(days) or not low <= days <= high:
        errors["trainingDays"] = f"Días de entreno entre {low} y {high}."

    if errors:
        return None, errors

    def optional(name: str) -> Optional[float]:
        value = data.get(name)
        return None if _blank(value) else float(value)

    profile = UserProfile(
        age=int(float(data["age"])),
        sex=sex,
        height=float(data["height"]),
        weight=float(data["weight"]),
        training_days=int(days),
        goal=goal,
        focus=focus,
        neck=optional("neck"),
        waist=optional("waist"),
        hip=optional("hip") if sex == Sex.FEMALE else None,
    )
    return profile, errors
