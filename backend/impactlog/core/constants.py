"""Shared application constants.

Centralizes storage keys, validation limits and display labels so the
store, the API and the summary export agree on them.
"""

APP_NAME = "ImpactLog"
APP_TAGLINE = "Your personal impact operating system"


class StorageKeys:
    """Namespaced keys of the local medium, one per entity collection."""

    WINS = "impactlog-wins"
    REFLECTIONS = "impactlog-reflections"
    USER_PREFERENCES = "impactlog-preferences"
    PROFILE = "impactlog-profile"

    @classmethod
    def all(cls) -> list[str]:
        return [cls.WINS, cls.REFLECTIONS, cls.USER_PREFERENCES, cls.PROFILE]


# Cloud collection (table) names
WINS_COLLECTION = "wins"
REFLECTIONS_COLLECTION = "reflections"
PROFILES_COLLECTION = "profiles"

# Validation limits for user-entered text
MIN_SITUATION_LENGTH = 10
MAX_SITUATION_LENGTH = 500
MIN_ACTION_LENGTH = 10
MAX_ACTION_LENGTH = 1000
MIN_IMPACT_LENGTH = 10
MAX_IMPACT_LENGTH = 1000
MAX_EVIDENCE_LENGTH = 500
MAX_REFLECTION_FIELD_LENGTH = 1000

# Manager-ready view defaults
SUMMARY_DEFAULT_DAYS = 30
SUMMARY_DEFAULT_LIMIT = 5

CATEGORY_LABELS = {
    "delivery": "Delivery",
    "stakeholder": "Stakeholder",
    "leadership": "Leadership",
    "process": "Process Improvement",
    "ai": "AI / Automation",
    "risk": "Risk Mitigation",
}

IMPACT_TYPE_LABELS = {
    "time-saved": "Time Saved",
    "cost-avoided": "Cost Avoided",
    "risk-reduced": "Risk Reduced",
    "quality-improved": "Quality Improved",
    "customer-satisfaction": "Customer Satisfaction",
}

# Rotated by day of week on the dashboard
MOTIVATIONAL_LINES = [
    "Small wins compound into big impact.",
    "Your work matters. Document it.",
    "Evidence beats memory. Every time.",
    "Great leaders track their impact.",
    "Build your narrative, one win at a time.",
    "Capture today's wins for tomorrow's success.",
    "Every impact documented is a story waiting to be told.",
    "Clarity today creates confidence tomorrow.",
    "What gets captured gets remembered.",
    "Progress is powerful when it is visible.",
    "Turn daily effort into lasting impact.",
    "Intentional reflection fuels consistent growth.",
    "Your impact deserves to be seen.",
    "Discipline in logging builds leadership muscle.",
    "From effort to evidence, one entry at a time.",
    "Small actions, clearly captured, shape big outcomes.",
    "Ownership begins with awareness.",
]
