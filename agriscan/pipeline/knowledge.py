"""
Disease lookup tables.

Keys are matched as case-insensitive substrings of the disease name, in
insertion order, so the more specific keys ("leaf blight") must come before
the general ones ("blight").
"""
from typing import Dict, List, Optional, TypeVar

T = TypeVar("T")

SYMPTOMS: Dict[str, List[str]] = {
    "leaf blight": ["Brown spots on leaves", "Yellowing edges", "Wilting"],
    "powdery mildew": ["White powdery spots", "Leaf distortion", "Stunted growth"],
    "root rot": ["Wilting despite watering", "Yellow leaves", "Soft roots"],
    "rust": ["Orange or brown spots", "Leaf drop", "Stunted growth"],
    "blight": ["Dark lesions", "Rapid spread", "Plant death"],
}

TREATMENTS: Dict[str, List[str]] = {
    "leaf blight": ["Apply copper-based fungicide", "Remove infected leaves", "Improve air circulation"],
    "powdery mildew": ["Apply neem oil solution", "Remove affected leaves", "Increase air circulation"],
    "root rot": ["Improve drainage", "Remove affected roots", "Apply fungicide to soil"],
    "rust": ["Apply fungicide", "Remove infected parts", "Improve spacing"],
    "blight": ["Immediate fungicide application", "Remove infected plants", "Preventive measures"],
}

PREVENTION: Dict[str, List[str]] = {
    "leaf blight": ["Avoid overhead watering", "Maintain proper spacing", "Use disease-resistant varieties"],
    "powdery mildew": ["Plant in full sun", "Avoid overcrowding", "Water at soil level"],
    "root rot": ["Use well-draining soil", "Avoid overwatering", "Plant in raised beds"],
    "rust": ["Choose resistant varieties", "Proper spacing", "Good air circulation"],
    "blight": ["Crop rotation", "Resistant varieties", "Early detection"],
}

# A reported disease with no table entry
UNMATCHED_SYMPTOMS = ["Visual symptoms detected", "Requires expert analysis"]
UNMATCHED_TREATMENTS = ["Consult agricultural expert", "Monitor plant health", "Implement preventive measures"]
UNMATCHED_PREVENTION = ["Regular monitoring", "Proper plant care", "Good cultural practices"]

# No disease reported at all
DEFAULT_SYMPTOMS = ["Visual symptoms detected", "Requires further analysis"]
DEFAULT_TREATMENTS = ["Consult with agricultural expert", "Monitor plant health"]
DEFAULT_PREVENTION = ["Regular monitoring", "Proper plant care"]

PATHOGENS: Dict[str, Dict[str, str]] = {
    "leaf blight": {
        "species": "Phytophthora infestans",
        "strain": "US-23",
        "matingType": "A2",
        "resistanceProfile": "Metalaxyl-resistant",
    },
    "powdery mildew": {
        "species": "Erysiphe cichoracearum",
        "strain": "EC-2023",
        "matingType": "A1",
        "resistanceProfile": "Sulfur-sensitive",
    },
    "root rot": {
        "species": "Fusarium oxysporum",
        "strain": "FO-2023",
        "matingType": "A1",
        "resistanceProfile": "Benomyl-resistant",
    },
}

UNKNOWN_PATHOGEN = {
    "species": "Unknown",
    "strain": "Unknown",
    "matingType": "Unknown",
    "resistanceProfile": "Unknown",
}

TREATMENT_EFFICACY: Dict[str, Dict[str, int]] = {
    "blight": {"copperBasedFungicide": 95, "biologicalControl": 87, "culturalPractices": 78, "preventionMeasures": 92},
    "mildew": {"copperBasedFungicide": 75, "biologicalControl": 82, "culturalPractices": 85, "preventionMeasures": 88},
    "rot": {"copperBasedFungicide": 65, "biologicalControl": 78, "culturalPractices": 85, "preventionMeasures": 90},
}

DEFAULT_EFFICACY = {"copperBasedFungicide": 80, "biologicalControl": 75, "culturalPractices": 70, "preventionMeasures": 85}

EPIDEMIOLOGY: Dict[str, dict] = {
    "blight": {
        "firstReported": 1892,
        "globalCases": "2.3M/year",
        "seasonalPeak": "Spring",
        "geographicSpread": "Worldwide",
        "regionalPrevalence": {"southeastAsia": "High Risk", "northAmerica": "Moderate Risk", "europe": "Low Risk"},
    },
    "mildew": {
        "firstReported": 1851,
        "globalCases": "1.8M/year",
        "seasonalPeak": "Summer",
        "geographicSpread": "Temperate regions",
        "regionalPrevalence": {"southeastAsia": "Moderate Risk", "northAmerica": "High Risk", "europe": "High Risk"},
    },
}

DEFAULT_EPIDEMIOLOGY = {
    "firstReported": 1880,
    "globalCases": "1.5M/year",
    "seasonalPeak": "Year-round",
    "geographicSpread": "Worldwide",
    "regionalPrevalence": {"southeastAsia": "Moderate Risk", "northAmerica": "Moderate Risk", "europe": "Moderate Risk"},
}

# severity -> (potential loss, treatment cost)
ECONOMIC_BASELINE = {
    "High": (3000, 250),
    "Moderate": (2000, 150),
    "Low": (1000, 100),
}

PLANT_KEYWORDS = ["plant", "leaf", "flower", "green", "nature", "garden"]


def lookup(table: Dict[str, T], disease: Optional[str]) -> Optional[T]:
    """Return the first entry whose key occurs in ``disease``."""
    if not disease:
        return None
    lowered = disease.lower()
    for key, value in table.items():
        if key in lowered:
            return value
    return None
