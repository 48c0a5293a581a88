"""Main FastAPI application for FitPlan.

 - Profile form -> BMI, body fat, BMR/TDEE and calorie targets (local)
 - AI workout routine (Gemini, Groq or OpenRouter)
 - Printable PDF of the whole plan
"""

from fastapi import FastAPI, Request, Form, Body
from fastapi.responses import HTMLResponse, JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.concurrency import run_in_threadpool
import uvicorn
import os
import json
import logging

import config

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("fitplan")

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# Import services
from services.metrics import calculate_fitness_metrics, Goal
from services.methods import method_info
from services.validation import parse_profile, navy_warning
from services.routine import (
    generate_workout_routine,
    parse_routine,
    RoutineGenerationError,
    RoutineFormatError,
)
from services.reporting import build_plan_pdf

# Initialize FastAPI app
app = FastAPI(title="FitPlan", version="1.0.0")

templates = Jinja2Templates(directory=os.path.join(BASE_DIR, "templates"))

static_dir = os.path.join(BASE_DIR, "static")
os.makedirs(static_dir, exist_ok=True)
app.mount("/static", StaticFiles(directory=static_dir), name="static")

DEFAULT_VALUES = {
    "age": "",
    "sex": "male",
    "height": "",
    "weight": "",
    "training_days": "4",
    "goal": Goal.BULKING.value,
    "focus": "hypertrophy",
    "neck": "",
    "waist": "",
    "hip": "",
}

GOAL_COLUMNS = [
    (Goal.CUTTING.value, "Definición"),
    (Goal.MAINTENANCE.value, "Mantenimiento"),
    (Goal.BULKING.value, "Volumen"),
]


def _tpl_ctx(request: Request, **extra):
    """Common template context."""
    ctx = {"request": request, "values": DEFAULT_VALUES, "errors": {}}
    ctx.update(extra)
    return ctx


def _form_values(**fields) -> dict:
    return {k: ("" if v is None else str(v)) for k, v in fields.items()}


def _profile_warning(profile):
    return navy_warning(profile.sex, profile.neck, profile.waist, profile.hip)


# Routes
@app.get("/", response_class=HTMLResponse)
async def form_page(request: Request):
    """Profile form."""
    return templates.TemplateResponse(request, "index.html", _tpl_ctx(request))


@app.post("/plan", response_class=HTMLResponse)
async def plan_submit(
    request: Request,
    age: str = Form(""),
    sex: str = Form("male"),
    height: str = Form(""),
    weight: str = Form(""),
    training_days: str = Form("4"),
    goal: str = Form("bulking"),
    focus: str = Form("hypertrophy"),
    neck: str = Form(""),
    waist: str = Form(""),
    hip: str = Form(""),
):
    """Validate the form, compute metrics and generate the routine."""
    values = _form_values(
        age=age, sex=sex, height=height, weight=weight, training_days=training_days,
        goal=goal, focus=focus, neck=neck, waist=waist, hip=hip,
    )
    profile, errors = parse_profile(values)
    if errors:
        return templates.TemplateResponse(
            request, "index.html", _tpl_ctx(request, values=values, errors=errors), status_code=400
        )

    results = calculate_fitness_metrics(profile)
    try:
        routine = await run_in_threadpool(generate_workout_routine, profile, results)
    except RoutineGenerationError as e:
        # partial results are not shown
        return templates.TemplateResponse(
            request, "index.html", _tpl_ctx(request, values=values, error=str(e)), status_code=502
        )

    return templates.TemplateResponse(
        request,
        "results.html",
        _tpl_ctx(
            request,
            values=values,
            profile=profile,
            results=results,
            routine=routine,
            routine_json=json.dumps(routine.to_dict(), ensure_ascii=False),
            method=method_info(results.body_fat_method),
            navy_warning=_profile_warning(profile),
            goal_columns=GOAL_COLUMNS,
        ),
    )


@app.post("/api/metrics", response_class=JSONResponse)
async def api_metrics(payload: dict = Body(...)):
    """Metrics only; no AI call."""
    profile, errors = parse_profile(payload)
    if errors:
        return JSONResponse({"ok": False, "errors": errors}, status_code=422)
    results = calculate_fitness_metrics(profile)
    return JSONResponse({
        "ok": True,
        "results": results.to_dict(),
        "method": method_info(results.body_fat_method),
        "navyWarning": _profile_warning(profile),
    })


@app.post("/api/plan", response_class=JSONResponse)
async def api_plan(payload: dict = Body(...)):
    """Metrics plus AI workout routine."""
    profile, errors = parse_profile(payload)
    if errors:
        return JSONResponse({"ok": False, "errors": errors}, status_code=422)
    results = calculate_fitness_metrics(profile)
    try:
        routine = await run_in_threadpool(generate_workout_routine, profile, results)
    except RoutineGenerationError as e:
        return JSONResponse({"ok": False, "error": str(e)}, status_code=502)
    return JSONResponse({"ok": True, "results": results.to_dict(), "routine": routine.to_dict()})


@app.get("/api/methods/{label}", response_class=JSONResponse)
async def api_method(label: str):
    """Display name and note for a body fat method label or alias."""
    return JSONResponse(method_info(label))


@app.post("/report")
async def report_pdf(
    age: str = Form(""),
    sex: str = Form("male"),
    height: str = Form(""),
    weight: str = Form(""),
    training_days: str = Form("4"),
    goal: str = Form("bulking"),
    focus: str = Form("hypertrophy"),
    neck: str = Form(""),
    waist: str = Form(""),
    hip: str = Form(""),
    routine_json: str = Form(""),
):
    """Printable PDF of the plan shown on the results page."""
    values = _form_values(
        age=age, sex=sex, height=height, weight=weight, training_days=training_days,
        goal=goal, focus=focus, neck=neck, waist=waist, hip=hip,
    )
    profile, errors = parse_profile(values)
    if errors:
        return JSONResponse({"ok": False, "errors": errors}, status_code=422)

    routine = None
    if routine_json.strip():
        try:
            routine = parse_routine(routine_json)
        except RoutineFormatError as e:
            logger.warning("Rejected routine in report request: %s", e)
            return JSONResponse({"ok": False, "error": "invalid_routine"}, status_code=400)

    results = calculate_fitness_metrics(profile)
    pdf = build_plan_pdf(profile, results, routine)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": 'attachment; filename="plan-fitplan.pdf"'},
    )


# Health check
@app.get("/health")
async def health_check():
    return {"status": "ok"}

if __name__ == "__main__":
    uvicorn.run("main:app", host=config.HOST, port=config.PORT, reload=config.DEBUG)
