import pytest

from buildtrack.services.suggestions import (
    suggest_project_type,
    should_suggest_project_type,
    FALLBACK_CONFIDENCE,
)

def test_commercial_keywords():
    result = suggest_project_type("Downtown office", "Retail podium and hotel lobby")
    assert result[0]["type"] == "COMMERCIAL"
    assert result[0]["confidence"] == 1
    assert result[0]["reason"] == "Contains keywords: office, retail, hotel"

def test_confidence_scales_with_matches():
    result = suggest_project_type("Factory", "")
    assert result == [{"type": "INDUSTRIAL", "confidence": pytest.approx(1 / 3), "reason": "Contains keywords: factory"}]

def test_renovation_in_name_is_boosted():
    result = suggest_project_type("Kitchen renovation", "Remodel and upgrade the kitchen in a family home")
    assert result[0]["type"] == "RENOVATION"
    assert result[0]["confidence"] == 1
    assert result[0]["reason"] == "Contains renovation keywords: renovation, remodel, upgrade"
    assert [s["type"] for s in result].count("RENOVATION") == 1
    assert result[1]["type"] == "RESIDENTIAL"

def test_renovation_keywords_without_name_hint():
    result = suggest_project_type("Bridge works", "Repair, retrofit and upgrade the old highway bridge")
    renovation = [s for s in result if s["type"] == "RENOVATION"]

    assert len(renovation) == 2
    assert renovation[0] == {"type": "RENOVATION", "confidence": 1, "reason": "Contains keywords: upgrade, repair, retrofit"}
    assert renovation[1] == {"type": "RENOVATION", "confidence": 0.9, "reason": "Contains renovation keywords: upgrade, repair, retrofit"}
    assert result[2] == {"type": "INFRASTRUCTURE", "confidence": pytest.approx(2 / 3), "reason": "Contains keywords: bridge, highway"}

def test_sorted_by_confidence():
    result = suggest_project_type("Factory office", "Manufacturing plant with production line and corporate office")
    confidences = [s["confidence"] for s in result]
    assert confidences == sorted(confidences, reverse=True)

def test_fallback_other():
    assert suggest_project_type("Lot 7", "Miscellaneous works") == [{
        "type": "OTHER",
        "confidence": FALLBACK_CONFIDENCE,
        "reason": "Unable to determine specific project type from description",
    }]

def test_case_insensitive():
    assert suggest_project_type("APARTMENT BLOCK", "")[0]["type"] == "RESIDENTIAL"

@pytest.mark.parametrize("name,description,expected", [
    ("", "", False),
    ("Harbor Tower", "", False),
    ("Harbor Tower", "phase two", True),
    ("New office fit-out", None, True),
])
def test_should_suggest(name, description, expected):
    assert should_suggest_project_type(name, description) is expected
