# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_spacelaw

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Runtime configuration. Every field can be overridden with a SPACELAW_ prefixed
    environment variable (e.g. SPACELAW_DATA_DIR, SPACELAW_REFERENCE_YEAR).
    """

    model_config = SettingsConfigDict(env_prefix="SPACELAW_", extra="ignore")

    # Reference content; None means the JSON tree packaged with the library.
    data_dir: Optional[Path] = None
    log_level: str = "INFO"

    recommendation_limit: int = Field(default=6, ge=0)
    guideline_recommendation_limit: int = Field(default=8, ge=0)
    cross_reference_limit: int = Field(default=4, ge=0)

    # Year used for regulatory maturity; None means the current calendar year.
    reference_year: Optional[int] = Field(default=None, ge=1950)


settings = Settings()
