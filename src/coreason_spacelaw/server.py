# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_spacelaw

from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel, Field

import coreason_spacelaw
from coreason_spacelaw.archive import get_default_archive
from coreason_spacelaw.config import settings
from coreason_spacelaw.core import ComplianceEngine, redact_space_law_result, validate_mission_profile
from coreason_spacelaw.exceptions import ProfileValidationError
from coreason_spacelaw.schema import (
    GuidelineAssessment,
    GuidelineAssessmentResult,
    GuidelineCategory,
    GuidelineSource,
    PolicyStatus,
    RedactedSpaceLawResult,
    SpaceLawAssessmentAnswers,
)
from coreason_spacelaw.utils.logger import logger


class GuidelineAssessmentRequest(BaseModel):
    profile: Dict[str, Any]
    assessments: List[GuidelineAssessment] = Field(default_factory=list)


class InsuranceScoreRequest(BaseModel):
    required_types: List[str]
    statuses: Dict[str, PolicyStatus] = Field(default_factory=dict)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Initializing Compliance Engine...")
    app.state.engine = ComplianceEngine(get_default_archive(), settings)
    yield
    logger.info("Shutting down Compliance Engine...")


app = FastAPI(lifespan=lifespan, title="CoReason Space Law Compliance API")


@app.get("/health")
async def health(request: Request):
    engine: ComplianceEngine = request.app.state.engine
    return {
        "status": "ready",
        "version": coreason_spacelaw.__version__,
        "data_version": engine.archive.version,
    }


@app.get("/jurisdictions")
async def list_jurisdictions(request: Request):
    engine: ComplianceEngine = request.app.state.engine
    return engine.archive.get_jurisdictions()


@app.get("/jurisdictions/{code}")
async def get_jurisdiction(request: Request, code: str):
    engine: ComplianceEngine = request.app.state.engine
    law = engine.archive.get_jurisdiction(code.upper())
    if law is None:
        raise HTTPException(status_code=404, detail=f"Unknown jurisdiction: {code}")
    return law


@app.get("/guidelines")
async def list_guidelines(
    request: Request,
    source: Optional[GuidelineSource] = None,
    category: Optional[GuidelineCategory] = None,
):
    engine: ComplianceEngine = request.app.state.engine
    return engine.archive.get_guidelines(
        sources=[source] if source else None,
        categories=[category] if category else None,
    )


@app.post("/assess/space-law", response_model=RedactedSpaceLawResult)
async def assess_space_law(request: Request, body: SpaceLawAssessmentAnswers):
    engine: ComplianceEngine = request.app.state.engine
    return redact_space_law_result(engine.assess_space_law(body))


@app.post("/assess/guidelines", response_model=GuidelineAssessmentResult)
async def assess_guidelines(request: Request, body: GuidelineAssessmentRequest):
    engine: ComplianceEngine = request.app.state.engine
    try:
        profile = validate_mission_profile(body.profile)
    except ProfileValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return engine.assess_guidelines(profile, body.assessments)


@app.post("/score/insurance")
async def score_insurance(request: Request, body: InsuranceScoreRequest):
    engine: ComplianceEngine = request.app.state.engine
    return {"score": engine.score_insurance(body.required_types, body.statuses)}
