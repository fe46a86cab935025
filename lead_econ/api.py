# lead_econ/api.py
from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import date
from typing import Any, Dict, List, Optional

import pandas as pd
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .collector import collect_cpl_inputs, collect_lvr_inputs, parse_number_list
from .config import APP_TITLE, APP_VERSION, get_settings
from .cpl import compute_cpl, cpl_sensitivity_grid, tiers_to_frame
from .currencies import CURRENCIES, display_name
from .dates import system_today
from .errors import InputValidationError, PreconditionError
from .logging_utils import configure_logging, log_event
from .lvr import compute_lvr, lvr_goal_grid
from .report import cpl_summary, lvr_summary
from .tiers import RECOMMENDED_TIER, TIERS

logger = logging.getLogger(__name__)

settings = get_settings()

app = FastAPI(title=APP_TITLE, version=APP_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.allow_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)


# -----------------------
# Schemas
# -----------------------
class CPLRequest(BaseModel):
    currency: Optional[str] = None
    average_revenue: float = Field(..., ge=0)
    gross_margin_percent: float = Field(..., ge=0)
    conversion_rate_percent: float = Field(..., ge=0)
    target_profit_margin_percent: Optional[float] = Field(None, ge=0)
    expected_cost_per_lead: float = Field(..., ge=0)


class CPLSensitivityRequest(CPLRequest):
    conversion_rates: List[float] = Field(..., min_length=1)


class LVRRequest(BaseModel):
    currency: Optional[str] = None
    last_month_leads: float = Field(..., ge=0)
    this_month_leads: float = Field(..., ge=0)
    day_of_month: Optional[int] = Field(None, ge=0)
    total_days_in_month: Optional[int] = Field(None, ge=0)
    conversion_rate_percent: float = Field(..., ge=0)
    ltv: float = Field(..., ge=0)
    monthly_lead_goal: Optional[float] = Field(None, ge=0)


class LVRGoalsRequest(LVRRequest):
    goals: List[float] = Field(..., min_length=1)


class CurrenciesResponse(BaseModel):
    default: str
    currencies: List[Dict[str, Any]]


class TiersResponse(BaseModel):
    recommended: str
    tiers: List[Dict[str, Any]]


# -----------------------
# Dependencies / utilities
# -----------------------
def get_today() -> date:
    """Current date for LVR defaults. Overridden in tests."""
    return system_today()


def _records(df: pd.DataFrame) -> List[Dict[str, Any]]:
    # NaN is not valid JSON
    return df.astype(object).where(df.notna(), None).to_dict(orient="records")


def _cpl_answers(req: CPLRequest) -> Dict[str, Any]:
    return req.model_dump(exclude={"conversion_rates"})


def _lvr_answers(req: LVRRequest) -> Dict[str, Any]:
    return req.model_dump(exclude={"goals"})


# -----------------------
# Error handlers
# -----------------------
@app.exception_handler(InputValidationError)
def _on_validation_error(request: Request, exc: InputValidationError) -> JSONResponse:
    log_event(logger, logging.WARNING, "input_rejected", path=request.url.path, field=exc.field, reason=exc.message)
    return JSONResponse(status_code=422, content={"field": exc.field, "detail": exc.message})


@app.exception_handler(PreconditionError)
def _on_precondition_error(request: Request, exc: PreconditionError) -> JSONResponse:
    log_event(logger, logging.WARNING, "precondition_failed", path=request.url.path, reason=str(exc))
    return JSONResponse(status_code=400, content={"detail": str(exc)})


# -----------------------
# Startup
# -----------------------
@app.on_event("startup")
def _startup() -> None:
    configure_logging(settings.log_level)
    logger.info("%s %s ready (default currency %s)", APP_TITLE, APP_VERSION, settings.default_currency)


# -----------------------
# Endpoints
# -----------------------
@app.get("/")
def root():
    return {
        "service": APP_TITLE,
        "version": APP_VERSION,
        "endpoints": {
            "health": "/health",
            "docs": "/docs",
            "currencies": "/currencies",
            "tiers": "/tiers",
            "cpl": "POST /cpl",
            "cpl_sensitivity": "POST /cpl/sensitivity",
            "lvr": "POST /lvr",
            "lvr_goals": "POST /lvr/goals",
        },
    }


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/currencies", response_model=CurrenciesResponse)
def list_currencies():
    return {
        "default": settings.default_currency,
        "currencies": [
            {"code": c.code, "name": display_name(c.code), "decimals": c.decimals}
            for c in CURRENCIES.values()
        ],
    }


@app.get("/tiers", response_model=TiersResponse)
def list_tiers():
    return {
        "recommended": RECOMMENDED_TIER,
        "tiers": [{"name": t.name, "label": t.label, "markup": t.markup} for t in TIERS.values()],
    }


@app.post("/cpl")
def cpl(req: CPLRequest):
    """
    Max affordable CPL for the client and the three agency pricing tiers.
    """
    inputs = collect_cpl_inputs(_cpl_answers(req), default_currency=settings.default_currency)
    results = compute_cpl(inputs)
    log_event(logger, logging.DEBUG, "cpl_computed", currency=inputs.currency, is_viable=results.is_viable)

    return {
        "inputs": asdict(inputs),
        "results": results.to_dict(),
        "tiers": _records(tiers_to_frame(results)),
        "summary": cpl_summary(inputs, results),
    }


@app.post("/cpl/sensitivity")
def cpl_sensitivity(req: CPLSensitivityRequest):
    inputs = collect_cpl_inputs(_cpl_answers(req), default_currency=settings.default_currency)
    rates = parse_number_list(req.conversion_rates, "conversion_rates")
    grid = cpl_sensitivity_grid(inputs, rates)
    log_event(logger, logging.DEBUG, "cpl_sensitivity_computed", rows=len(grid))
    return {"currency": inputs.currency, "rows": _records(grid)}


@app.post("/lvr")
def lvr(req: LVRRequest, today: date = Depends(get_today)):
    """
    Lead velocity, end-of-month projection and revenue impact.
    day_of_month / total_days_in_month default to today's date.

    400 when last_month_leads or day_of_month is zero.
    """
    inputs = collect_lvr_inputs(_lvr_answers(req), today=lambda: today, default_currency=settings.default_currency)
    results = compute_lvr(inputs)
    log_event(logger, logging.DEBUG, "lvr_computed", currency=inputs.currency, goal_met=results.goal_met)

    return {
        "inputs": asdict(inputs),
        "results": results.to_dict(),
        "summary": lvr_summary(inputs, results),
    }


@app.post("/lvr/goals")
def lvr_goals(req: LVRGoalsRequest, today: date = Depends(get_today)):
    inputs = collect_lvr_inputs(_lvr_answers(req), today=lambda: today, default_currency=settings.default_currency)
    goals = parse_number_list(req.goals, "goals")
    grid = lvr_goal_grid(inputs, goals)
    log_event(logger, logging.DEBUG, "lvr_goals_computed", rows=len(grid))
    return {"currency": inputs.currency, "rows": _records(grid)}
