"""
diagnostics.py — recoverable, non-fatal findings raised during a pipeline run.

Warnings are data, not console output: each stage appends a Diagnostic to the
per-call list and the pipeline hands that list back with the result. Every
diagnostic is also sent once through the module logger at WARNING level so
callers that only configure logging still see it.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List

logger = logging.getLogger(__name__)


class DiagnosticCode(str, Enum):
    NEGATIVE_INPUT = "negative_input"
    PHOTON_BUDGET = "photon_budget"


@dataclass(frozen=True)
class Diagnostic:
    """
    One advisory message.

    code : which condition was detected
    message : human-readable description
    value : the offending number (minimum pixel value, relative photon error)
    """
    code: DiagnosticCode
    message: str
    value: float | None = None


def report(diagnostics: List[Diagnostic], diagnostic: Diagnostic) -> Diagnostic:
    """Append `diagnostic` to the call's list and log it."""
    diagnostics.append(diagnostic)
    logger.warning("%s: %s", diagnostic.code.value, diagnostic.message)
    return diagnostic
