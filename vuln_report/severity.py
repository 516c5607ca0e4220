# vuln_report/severity.py
import logging
from decimal import Decimal

from cvss import CVSS2, CVSS3, CVSS4
from cvss.exceptions import CVSSError

logger = logging.getLogger(__name__)

CRITICAL = "CRITICAL"
HIGH = "HIGH"
MEDIUM = "MEDIUM"
LOW = "LOW"
UNKNOWN = "UNKNOWN"

RATINGS = (CRITICAL, HIGH, MEDIUM, LOW, UNKNOWN)


def rating_for_score(score: float | Decimal | None) -> str:
    # All CVSS versions share the same qualitative scale
    if score is None:
        return UNKNOWN
    elif score > 10.0:
        return UNKNOWN
    elif score >= 9.0:
        return CRITICAL
    elif score >= 7.0:
        return HIGH
    elif score >= 4.0:
        return MEDIUM
    elif score > 0.0:
        return LOW
    else: # 0.0 and negative scores carry no rating
        return UNKNOWN


def score_vector(vector: str) -> Decimal:
    """Base score of a CVSS v2, v3.x or v4.0 vector string."""
    if vector.startswith("CVSS:4"):
        return CVSS4(vector).base_score
    if vector.startswith("CVSS:3"):
        return CVSS3(vector).base_score
    return CVSS2(vector).base_score


def calculate_rating(score: str | None) -> tuple[str, Exception | None]:
    """
    Maps a severity score string to a coarse rating.
    Accepts numeric scores ("7.5") or CVSS vectors. Never raises: an
    unrecognised score rates as UNKNOWN and the parse error is returned
    alongside it.
    """
    if not score or not score.strip():
        return UNKNOWN, None
    score = score.strip()
    try:
        return rating_for_score(float(score)), None
    except ValueError:
        pass
    try:
        return rating_for_score(score_vector(score)), None
    except (CVSSError, ValueError, KeyError) as e:
        logger.debug(f"Could not rate severity score '{score}': {e}")
        return UNKNOWN, e
