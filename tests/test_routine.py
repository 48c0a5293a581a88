"""Tests for routine prompt building, parsing and generation."""

import pytest

from services import llm
from services.metrics import calculate_fitness_metrics
from services.routine import (
    GENERATION_ERROR_MESSAGE,
    WORKOUT_ROUTINE_SCHEMA,
    RoutineFormatError,
    RoutineGenerationError,
    build_routine_prompt,
    generate_workout_routine,
    parse_routine,
)


class TestPrompt:
    def test_contains_profile_and_metrics(self, male_navy_profile):
        results = calculate_fitness_metrics(male_navy_profile)

        prompt = build_routine_prompt(male_navy_profile, results)

        assert "Edad: 30 años" in prompt
        assert "Sexo: Hombre" in prompt
        assert "Altura: 175 cm" in prompt
        assert "IMC: 24.5" in prompt
        assert "grasa corporal estimado: 16.9%" in prompt
        assert "Crea una rutina de 4 días" in prompt
        assert "ganar masa muscular (volumen)" in prompt
        assert "3177 kcal" in prompt

    def test_goal_and_focus_text(self, female_plain_profile):
        results = calculate_fitness_metrics(female_plain_profile)

        prompt = build_routine_prompt(female_plain_profile, results)

        assert "Sexo: Mujer" in prompt
        assert "perder grasa manteniendo el músculo (definición)" in prompt
        assert "enfoque de 'fuerza'" in prompt


class TestParse:
    def test_parses_payload(self, routine_text):
        routine = parse_routine(routine_text)

        assert routine.routine_title.startswith("Proyecto Titán")
        assert len(routine.weekly_schedule) == 2
        assert routine.weekly_schedule[0].exercises[0].name == "Press de Banca Plano"
        assert routine.weekly_schedule[1].exercises[0].sets == "5x5"

    def test_strips_markdown_fence(self, routine_text):
        routine = parse_routine(f"```json\n{routine_text}\n```")

        assert routine.general_notes

    def test_to_dict_matches_wire_shape(self, routine_text, routine_payload):
        assert parse_routine(routine_text).to_dict() == routine_payload

    @pytest.mark.parametrize(
        "text",
        [
            "no es json",
            "[]",
            '{"routineTitle": "x", "generalNotes": "y"}',
            '{"routineTitle": "x", "weeklySchedule": {"a": 1}, "generalNotes": "y"}',
            '{"routineTitle": "x", "weeklySchedule": ["día"], "generalNotes": "y"}',
            '{"routineTitle": "x", "weeklySchedule": [{"day": "Lunes", "exercises": 5}], "generalNotes": "y"}',
            '{"routineTitle": "x", "weeklySchedule": [{"day": "Lunes", "exercises": "sentadilla"}], "generalNotes": "y"}',
        ],
    )
    def test_rejects_malformed(self, text):
        with pytest.raises(RoutineFormatError):
            parse_routine(text)


class TestGenerate:
    def test_success(self, monkeypatch, male_navy_profile, routine_text):
        seen = {}

        def fake_generate_json(prompt, schema):
            seen["prompt"] = prompt
            seen["schema"] = schema
            return routine_text

        monkeypatch.setattr(llm, "generate_json", fake_generate_json)
        results = calculate_fitness_metrics(male_navy_profile)

        routine = generate_workout_routine(male_navy_profile, results)

        assert routine.routine_title.startswith("Proyecto")
        assert seen["schema"] is WORKOUT_ROUTINE_SCHEMA
        assert "IMC: 24.5" in seen["prompt"]

    def test_no_provider(self, male_navy_profile):
        results = calculate_fitness_metrics(male_navy_profile)

        with pytest.raises(RoutineGenerationError) as exc:
            generate_workout_routine(male_navy_profile, results)
        assert str(exc.value) == GENERATION_ERROR_MESSAGE

    def test_malformed_answer(self, monkeypatch, male_navy_profile):
        monkeypatch.setattr(llm, "generate_json", lambda prompt, schema: '{"routineTitle": "solo"}')
        results = calculate_fitness_metrics(male_navy_profile)

        with pytest.raises(RoutineGenerationError) as exc:
            generate_workout_routine(male_navy_profile, results)
        assert isinstance(exc.value.__cause__, RoutineFormatError)

    def test_exercises_not_a_list(self, monkeypatch, male_navy_profile):
        answer = '{"routineTitle": "x", "weeklySchedule": [{"day": "Lunes", "exercises": 5}], "generalNotes": "y"}'
        monkeypatch.setattr(llm, "generate_json", lambda prompt, schema: answer)
        results = calculate_fitness_metrics(male_navy_profile)

        with pytest.raises(RoutineGenerationError):
            generate_workout_routine(male_navy_profile, results)
