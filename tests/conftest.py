"""Shared fixtures.

Provider keys are blanked for every test so nothing reaches the network.
"""

from __future__ import annotations

import json

import pytest

import config
from services.metrics import Focus, Goal, Sex, UserProfile


@pytest.fixture(autouse=True)
def no_llm_keys(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "GEMINI_API_KEY", "")
    monkeypatch.setattr(config, "GROQ_API_KEY", "")
    monkeypatch.setattr(config, "OPENROUTER_API_KEY", "")


@pytest.fixture
def male_navy_profile() -> UserProfile:
    return UserProfile(
        age=30,
        sex=Sex.MALE,
        height=175,
        weight=75,
        training_days=4,
        goal=Goal.BULKING,
        focus=Focus.HYPERTROPHY,
        neck=38,
        waist=85,
    )


@pytest.fixture
def female_plain_profile() -> UserProfile:
    return UserProfile(
        age=28,
        sex=Sex.FEMALE,
        height=165,
        weight=60,
        training_days=3,
        goal=Goal.CUTTING,
        focus=Focus.STRENGTH,
    )


@pytest.fixture
def routine_payload() -> dict:
    return {
        "routineTitle": "Proyecto Titán: Fuerza e Hipertrofia",
        "weeklySchedule": [
            {
                "day": "Día 1: Torso",
                "focus": "Hipertrofia de Pectorales",
                "exercises": [
                    {"name": "Press de Banca Plano", "sets": "4x8-12", "notes": "Descanso: 90s"},
                    {"name": "Remo con Barra", "sets": "4x8-12", "notes": "Espalda neutra"},
                ],
            },
            {
                "day": "Día 2: Pierna",
                "focus": "Fuerza de Piernas",
                "exercises": [
                    {"name": "Sentadilla", "sets": "5x5", "notes": "Controla la bajada (2s)"},
                ],
            },
        ],
        "generalNotes": "Progresa en carga cada semana y duerme al menos 7 horas.",
    }


@pytest.fixture
def routine_text(routine_payload: dict) -> str:
    return json.dumps(routine_payload, ensure_ascii=False)
