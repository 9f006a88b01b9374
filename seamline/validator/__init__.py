"""
Code Validator — public API.

Exposed names
-------------
validate_pattern_code  -- static plausibility check of generated pattern code
CodeValidationResult   -- outcome (valid: bool, error, error_type)
"""

from seamline.validator.code import (
    MISSING_DESIGN,
    MISSING_PRIMITIVES,
    SYNTAX_ERROR,
    CodeValidationResult,
    validate_pattern_code,
)

__all__ = [
    "validate_pattern_code",
    "CodeValidationResult",
    "MISSING_DESIGN",
    "MISSING_PRIMITIVES",
    "SYNTAX_ERROR",
]
