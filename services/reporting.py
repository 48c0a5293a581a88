"""PDF export of a generated plan.

Uses reportlab (pure python). Generates bytes.
"""

from __future__ import annotations

from datetime import datetime
from io import BytesIO
from typing import Optional

from reportlab.lib.pagesizes import letter
from reportlab.lib.units import inch
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from services.methods import method_info
from services.metrics import FitnessResult, Goal, Sex, UserProfile
from services.routine import WorkoutRoutine

GOAL_LABELS = {
    Goal.CUTTING: "Definición",
    Goal.MAINTENANCE: "Mantenimiento",
    Goal.BULKING: "Volumen",
}

DISCLAIMER = (
    "Las métricas son estimaciones para adultos y no sustituyen una evaluación clínica. "
    "Los objetivos calóricos son puntos de partida; monitoriza tu peso y medidas durante 2-4 semanas "
    "y ajusta ±100-200 kcal según tu respuesta. Consulta siempre a un profesional de la salud o del "
    "deporte antes de iniciar un nuevo plan de nutrición o entrenamiento."
)

LEFT = 0.8 * inch
RIGHT = 7.7 * inch
BOTTOM = 0.9 * inch


class _Writer:
    """Keeps the cursor and starts a new page when the bottom margin is hit."""

    def __init__(self, c: canvas.Canvas):
        self.c = c
        self.width, self.height = letter
        self.y = self.height - 0.8 * inch

    def ensure(self, needed: float) -> None:
        if self.y - needed < BOTTOM:
            self.c.showPage()
            self.y = self.height - 0.8 * inch

    def line(self, text: str, *, font: str = "Helvetica", size: int = 10, x: float = LEFT, gap: float = 0.18 * inch) -> None:
        self.ensure(gap)
        self.c.setFont(font, size)
        self.c.drawString(x, self.y, text)
        self.y -= gap

    def paragraph(self, text: str, *, font: str = "Helvetica", size: int = 10, x: float = LEFT) -> None:
        for chunk in simpleSplit(text, font, size, RIGHT - x):
            self.line(chunk, font=font, size=size, x=x, gap=size * 1.4)

    def space(self, amount: float) -> None:
        self.y -= amount


def build_plan_pdf(profile: UserProfile, results: FitnessResult, routine: Optional[WorkoutRoutine] = None) -> bytes:
    """Create a printable PDF with the metrics, calorie targets and routine."""
    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.setTitle("FitPlan — Tu Plan Personalizado")
    w = _Writer(c)

    w.line("FitPlan — Tu Plan Personalizado", font="Helvetica-Bold", size=16, gap=0.3 * inch)
    sex = "Hombre" if profile.sex == Sex.MALE else "Mujer"
    w.line(f"Generado: {datetime.now().strftime('%Y-%m-%d %H:%M')}", size=9)
    w.line(
        f"Perfil: {profile.age} años, {sex}, {profile.height:g} cm, {profile.weight:g} kg, "
        f"{profile.training_days} días/semana",
        size=10,
    )

    method = method_info(results.body_fat_method)
    w.space(0.15 * inch)
    w.line("Métricas", font="Helvetica-Bold", size=12, gap=0.22 * inch)
    w.line(f"IMC: {results.bmi}")
    w.line(f"% Grasa ({method['name']}): {results.body_fat_percentage}%")
    w.line(f"Metabolismo Basal (BMR): {results.bmr} kcal")
    w.line(f"Gasto Energético Total (TDEE): {results.tdee} kcal")

    w.space(0.15 * inch)
    w.line("Calorías Objetivo Diarias", font="Helvetica-Bold", size=12, gap=0.22 * inch)
    for goal in (Goal.CUTTING, Goal.MAINTENANCE, Goal.BULKING):
        marker = "  (tu objetivo)" if goal == profile.goal else ""
        font = "Helvetica-Bold" if goal == profile.goal else "Helvetica"
        w.line(f"{GOAL_LABELS[goal]}: {results.target_calories.for_goal(goal)} kcal/día{marker}", font=font)

    if routine is not None:
        w.space(0.15 * inch)
        w.paragraph(routine.routine_title, font="Helvetica-Bold", size=13)
        w.paragraph(routine.general_notes, size=9)
        for day in routine.weekly_schedule:
            w.space(0.1 * inch)
            w.ensure(0.6 * inch)
            w.paragraph(f"{day.day} - {day.focus}", font="Helvetica-Bold", size=11)
            for ex in day.exercises:
                w.paragraph(f"• {ex.name}  {ex.sets}", size=9, x=LEFT + 0.15 * inch)
                if ex.notes:
                    w.paragraph(ex.notes, font="Helvetica-Oblique", size=8, x=LEFT + 0.35 * inch)

    w.space(0.2 * inch)
    w.line("Aviso Importante", font="Helvetica-Bold", size=10)
    w.paragraph(DISCLAIMER, size=8)

    c.showPage()
    c.save()
    return buf.getvalue()
