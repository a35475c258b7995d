"""Company org chart: department -> teams"""
from typing import Dict, List

ORG_STRUCTURE: Dict[str, List[str]] = {
    "Marketing": ["Planning & PR", "MICE Center"],
    "Landing Operations": ["Ferry Operations", "Welcome Services"],
    "Management Planning": ["General Affairs", "Safety & Health", "Human Resources"],
    "Water Leisure": ["Water Leisure"],
    "Accounting Office": ["Accounting"],
    "Park Management": ["Facility Management", "Environment Management"],
    "Landscape Design Office": ["Space Planning", "Craft Studio", "Tourism Landscaping"],
    "Affiliate Business Office": ["Affiliate Business"],
    "Eco-Ship Research Office": ["Eco-Ship Research"],
}

# Short keys used in generated test-account emails
TEAM_KEYS: Dict[str, str] = {
    "Planning & PR": "plan",
    "MICE Center": "mice",
    "Ferry Operations": "sail",
    "Welcome Services": "welcome",
    "General Affairs": "gen",
    "Safety & Health": "safe",
    "Human Resources": "hr",
    "Water Leisure": "water",
    "Accounting": "acc",
    "Facility Management": "fac",
    "Environment Management": "env",
    "Space Planning": "space",
    "Craft Studio": "craft",
    "Tourism Landscaping": "land",
    "Affiliate Business": "biz",
    "Eco-Ship Research": "ship",
}


def is_valid_team(department: str, team_id: str) -> bool:
    return team_id in ORG_STRUCTURE.get(department, [])
