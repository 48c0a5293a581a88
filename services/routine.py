"""AI workout routine.

Builds the Spanish prompt from the profile and computed metrics, asks the
LLM layer for a JSON routine matching WORKOUT_ROUTINE_SCHEMA and parses it.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any

from services import llm
from services.metrics import FitnessResult, Focus, Goal, Sex, UserProfile

logger = logging.getLogger(__name__)

GENERATION_ERROR_MESSAGE = "No se pudo generar la rutina. Por favor, inténtalo de nuevo más tarde."


class RoutineGenerationError(Exception):
    """Raised when no usable routine could be obtained. The message is user-facing."""

    def __init__(self, message: str = GENERATION_ERROR_MESSAGE):
        super().__init__(message)


class RoutineFormatError(ValueError):
    """The model answered, but not with the expected JSON structure."""


@dataclass(frozen=True)
class Exercise:
    name: str
    sets: str
    notes: str


@dataclass(frozen=True)
class DailyWorkout:
    day: str
    focus: str
    exercises: list[Exercise] = field(default_factory=list)


@dataclass(frozen=True)
class WorkoutRoutine:
    routine_title: str
    weekly_schedule: list[DailyWorkout]
    general_notes: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "routineTitle": self.routine_title,
            "weeklySchedule": [
                {
                    "day": d.day,
                    "focus": d.focus,
                    "exercises": [{"name": e.name, "sets": e.sets, "notes": e.notes} for e in d.exercises],
                }
                for d in self.weekly_schedule
            ],
            "generalNotes": self.general_notes,
        }


WORKOUT_ROUTINE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "routineTitle": {
            "type": "STRING",
            "description": "Un título creativo y motivador para la rutina de entrenamiento. "
            "Ejemplo: 'Proyecto Titán: Fuerza e Hipertrofia'.",
        },
        "weeklySchedule": {
            "type": "ARRAY",
            "description": "Un array de objetos, donde cada objeto representa el entrenamiento de un día de la semana.",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "day": {
                        "type": "STRING",
                        "description": "El día del entrenamiento. Ejemplo: 'Día 1: Pecho y Tríceps' o 'Lunes: Tren Superior'.",
                    },
                    "focus": {
                        "type": "STRING",
                        "description": "El enfoque muscular o tipo de entrenamiento del día. "
                        "Ejemplo: 'Hipertrofia de Pectorales' o 'Fuerza de Piernas'.",
                    },
                    "exercises": {
                        "type": "ARRAY",
                        "description": "Una lista de los ejercicios para ese día.",
                        "items": {
                            "type": "OBJECT",
                            "properties": {
                                "name": {
                                    "type": "STRING",
                                    "description": "Nombre del ejercicio. Ejemplo: 'Press de Banca Plano'.",
                                },
                                "sets": {
                                    "type": "STRING",
                                    "description": "Número de series y repeticiones. Formato '3x8-12'. El rango de "
                                    "repeticiones debe ser apropiado para el objetivo (fuerza o hipertrofia).",
                                },
                                "notes": {
                                    "type": "STRING",
                                    "description": "Notas breves y útiles sobre la ejecución, tempo, o descanso. "
                                    "Ejemplo: 'Controla la bajada (2s)' o 'Descanso: 60-90s'.",
                                },
                            },
                            "required": ["name", "sets", "notes"],
                        },
                    },
                },
                "required": ["day", "focus", "exercises"],
            },
        },
        "generalNotes": {
            "type": "STRING",
            "description": "Una nota general de 2-3 frases con consejos sobre la progresión, la importancia del "
            "descanso y la nutrición, adaptado al objetivo del usuario.",
        },
    },
    "required": ["routineTitle", "weeklySchedule", "generalNotes"],
}

GOAL_TEXT = {
    Goal.BULKING: "ganar masa muscular (volumen)",
    Goal.CUTTING: "perder grasa manteniendo el músculo (definición)",
    Goal.MAINTENANCE: "mantener su físico actual (mantenimiento)",
}

FOCUS_TEXT = {
    Focus.STRENGTH: "fuerza",
    Focus.HYPERTROPHY: "hipertrofia",
}


def build_routine_prompt(profile: UserProfile, results: FitnessResult) -> str:
    sex = "Hombre" if profile.sex == Sex.MALE else "Mujer"
    focus = FOCUS_TEXT[profile.focus]
    return f"""
Eres un experto entrenador personal y nutricionista certificado.
Crea un plan de entrenamiento de gimnasio detallado y optimizado para un usuario con las siguientes características y objetivos.
Responde únicamente con el objeto JSON, sin texto introductorio, explicaciones adicionales o markdown.

**Datos del Usuario:**
- Edad: {profile.age} años
- Sexo: {sex}
- Altura: {profile.height:g} cm
- Peso: {profile.weight:g} kg
- IMC: {results.bmi}
- Porcentaje de grasa corporal estimado: {results.body_fat_percentage}%
- Días de entrenamiento por semana: {profile.training_days}

**Objetivos:**
- Objetivo principal: {GOAL_TEXT[profile.goal]}
- Enfoque del entrenamiento: {focus}
- Calorías diarias objetivo: {results.target_calories.for_goal(profile.goal)} kcal

**Instrucciones para la rutina:**
1. Crea una rutina de {profile.training_days} días. Si son 3 días, una rutina Full Body es ideal. Si son 4, una división Torso/Pierna o similar. Si son 5-6, una división Push/Pull/Legs o por grupos musculares.
2. El número de ejercicios por día debe ser razonable (entre 5 y 8).
3. El rango de repeticiones y las series deben ser coherentes con el enfoque de '{focus}'. Para hipertrofia, rangos de 8-12 reps. Para fuerza, rangos de 3-6 reps. Puedes incluir ejercicios accesorios en rangos de hipertrofia incluso en rutinas de fuerza.
4. Selecciona los ejercicios más efectivos, priorizando compuestos (sentadillas, peso muerto, press banca, remos, press militar) y complementando con ejercicios de aislamiento.
5. Asegúrate de que la estructura del JSON de salida sea exactamente la que se define en el schema. No añadas propiedades extra.
"""


_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def _str(value: Any) -> str:
    return "" if value is None else str(value)


def parse_routine(text: str) -> WorkoutRoutine:
    """Parse the model's JSON answer into a WorkoutRoutine.

    Raises:
        RoutineFormatError: not JSON, or the top-level keys are missing
    """
    raw = (text or "").strip()
    fenced = _FENCE.match(raw)
    if fenced:
        raw = fenced.group(1)
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise RoutineFormatError(f"Routine is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise RoutineFormatError("Routine must be a JSON object")
    if not (data.get("routineTitle") and data.get("weeklySchedule") and data.get("generalNotes")):
        raise RoutineFormatError("Routine is missing routineTitle, weeklySchedule or generalNotes")
    if not isinstance(data["weeklySchedule"], list):
        raise RoutineFormatError("weeklySchedule must be a list")

    schedule = []
    for day in data["weeklySchedule"]:
        if not isinstance(day, dict):
            raise RoutineFormatError("weeklySchedule entries must be objects")
        raw_exercises = day.get("exercises") or []
        if not isinstance(raw_exercises, list):
            raise RoutineFormatError("exercises must be a list")
        exercises = [
            Exercise(name=_str(e.get("name")), sets=_str(e.get("sets")), notes=_str(e.get("notes")))
            for e in raw_exercises
            if isinstance(e, dict)
        ]
        schedule.append(DailyWorkout(day=_str(day.get("day")), focus=_str(day.get("focus")), exercises=exercises))

    return WorkoutRoutine(
        routine_title=_str(data["routineTitle"]),
        weekly_schedule=schedule,
        general_notes=_str(data["generalNotes"]),
    )


def generate_workout_routine(profile: UserProfile, results: FitnessResult) -> WorkoutRoutine:
    """
    Generate a workout routine for the profile using the configured LLM.

    Args:
        profile: Validated user profile
        results: Metrics computed for that profile

    Returns:
        The parsed WorkoutRoutine

    Raises:
        RoutineGenerationError: no provider answered or the answer was malformed
    """
    prompt = build_routine_prompt(profile, results)
    text = llm.generate_json(prompt, WORKOUT_ROUTINE_SCHEMA)
    if not text:
        raise RoutineGenerationError()
    try:
        return parse_routine(text)
    except RoutineFormatError as e:
        logger.error("Error generating workout routine: %s", e)
        raise RoutineGenerationError() from e
