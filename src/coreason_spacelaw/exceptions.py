# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_spacelaw


class SpaceLawError(Exception):
    """Base class for errors raised at the engine boundary."""


class ProfileValidationError(SpaceLawError, ValueError):
    """
    Raised when a mission profile is missing a required field or carries an invalid value.
    """


class ReferenceDataError(SpaceLawError, ValueError):
    """
    Raised when reference content cannot be parsed, validated or de-duplicated.
    """
