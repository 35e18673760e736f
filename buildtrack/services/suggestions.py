#buildtrack/services/suggestions.py
"""
Keyword-based project type suggestions.

The name and description are lower-cased and scanned for fixed keyword lists
(plain substring matches). Each type with at least one hit is suggested with
confidence min(hits / 3, 1). A project whose name says "renovation" gets a
boosted RENOVATION suggestion instead of the regular one.
"""
import logging
from typing import Dict, List

from buildtrack.models.project import ProjectType

logger = logging.getLogger("BuildTrack.Suggestions")

TYPE_KEYWORDS: Dict[ProjectType, List[str]] = {
    ProjectType.RESIDENTIAL: [
        "house", "home", "apartment", "condo", "condominium", "residential",
        "housing", "dwelling", "townhouse", "villa", "cabin", "cottage",
        "residence", "living",
    ],
    ProjectType.COMMERCIAL: [
        "office", "retail", "store", "shop", "mall", "commercial", "business",
        "restaurant", "hotel", "corporate", "workspace", "headquarters",
    ],
    ProjectType.INDUSTRIAL: [
        "factory", "plant", "warehouse", "industrial", "manufacturing", "production",
        "assembly", "storage", "distribution", "processing", "facility",
    ],
    ProjectType.INFRASTRUCTURE: [
        "road", "bridge", "highway", "tunnel", "railway", "pipeline", "utility",
        "infrastructure", "public", "transit", "transportation", "power", "water",
        "dam", "airport", "station",
    ],
    ProjectType.RENOVATION: [
        "renovation", "remodel", "refurbish", "update", "restore", "modernize",
        "upgrade", "repair", "retrofit", "rehab", "revitalize", "conversion",
    ],
    ProjectType.OTHER: [],
}

FALLBACK_CONFIDENCE = 0.4
MIN_WORDS_FOR_SUGGESTION = 3

def _suggestion(project_type: ProjectType, confidence: float, reason: str) -> Dict:
    return {"type": project_type.value, "confidence": confidence, "reason": reason}

def suggest_project_type(name: str, description: str) -> List[Dict]:
    """
    Ranked suggestions [{type, confidence, reason}], highest confidence first.
    Never empty: with no keyword hits the answer is OTHER at 0.4.
    """
    name = name or ""
    text = f"{name} {description or ''}".lower()

    renovation_matches = [k for k in TYPE_KEYWORDS[ProjectType.RENOVATION] if k in text]
    renovation_in_name = bool(renovation_matches) and "renovation" in name.lower()

    suggestions: List[Dict] = []
    if renovation_in_name:
        suggestions.append(_suggestion(
            ProjectType.RENOVATION,
            min(len(renovation_matches) / 2 + 0.3, 1),
            f"Contains renovation keywords: {', '.join(renovation_matches)}",
        ))

    for project_type, keywords in TYPE_KEYWORDS.items():
        if project_type == ProjectType.OTHER:
            continue
        if project_type == ProjectType.RENOVATION and renovation_in_name:
            continue
        matched = [k for k in keywords if k in text]
        if not matched:
            continue
        # the renovation type is also listed once at a capped, lower confidence
        if project_type == ProjectType.RENOVATION and not any(
            s["type"] == ProjectType.RENOVATION.value for s in suggestions
        ):
            suggestions.append(_suggestion(
                ProjectType.RENOVATION,
                min(len(renovation_matches) / 3, 0.9),
                f"Contains renovation keywords: {', '.join(renovation_matches)}",
            ))
        suggestions.append(_suggestion(
            project_type,
            min(len(matched) / 3, 1),
            f"Contains keywords: {', '.join(matched)}",
        ))

    if not suggestions:
        suggestions.append(_suggestion(
            ProjectType.OTHER,
            FALLBACK_CONFIDENCE,
            "Unable to determine specific project type from description",
        ))

    suggestions.sort(key=lambda s: s["confidence"], reverse=True)
    logger.debug(f"Suggested types for '{name}': {[s['type'] for s in suggestions]}")
    return suggestions

def should_suggest_project_type(name: str, description: str) -> bool:
    return len(f"{name or ''} {description or ''}".split()) >= MIN_WORDS_FOR_SUGGESTION
