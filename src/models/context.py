"""
Contextual features for the contextual bandit.

The context vector is produced upstream from the user's state and
environment. Values arriving out of range are clamped rather than rejected,
so a noisy upstream estimate never breaks selection.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from src.models.enums import InterventionCategory, InterventionIntensity, MoodTrend


# Order is part of the model: weights learned against this layout
FEATURE_NAMES: tuple[str, ...] = (
    "valence",
    "arousal",
    "dominance",
    "emotional_stability",
    "mood_trend_improving",
    "mood_trend_declining",
    "energy_level",
    "coping_capacity",
    "social_support",
    "risk_level",
    "hour_normalized",
    "day_of_week_normalized",
    "completion_rate",
    "engagement_score",
    "intervention_fatigue",
    "bias",
)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, float(value)))


class ContextualFeatures(BaseModel):
    """Snapshot of the user's state at a decision point."""

    # Emotional
    valence: float = Field(default=0.0, description="-1 to 1")
    arousal: float = Field(default=0.5, description="0 to 1")
    dominance: float = Field(default=0.5, description="0 to 1")
    emotional_stability: float = Field(default=0.5, description="0 to 1")
    mood_trend: MoodTrend = MoodTrend.STABLE
    current_emotion: Optional[str] = None

    # Cognitive
    cognitive_distortion_count: int = 0
    primary_distortion: Optional[str] = None
    cognitive_flexibility: float = 0.5
    insight_level: float = 0.5

    # Resources
    energy_level: float = 0.5
    coping_capacity: float = 0.5
    social_support: float = 0.5

    # Risk
    risk_level: float = 0.0
    crisis_proximity: float = 0.0

    # Temporal
    hour_of_day: int = Field(default=12, description="0-23")
    day_of_week: int = Field(default=0, description="0-6")
    minutes_since_last_interaction: float = 0.0
    sessions_today: int = 0
    sessions_total_lifetime: int = 0
    days_since_first_session: int = 0
    time_available_seconds: Optional[float] = None

    # Behavioral
    average_session_duration: float = 0.0
    completion_rate: float = 0.5
    engagement_score: float = 0.5
    preferred_intensity: InterventionIntensity = InterventionIntensity.BRIEF
    preferred_category: Optional[InterventionCategory] = None

    # Intervention history
    last_intervention_category: Optional[InterventionCategory] = None
    last_intervention_outcome: Optional[float] = None
    intervention_fatigue: float = 0.0
    category_exposure_counts: dict[InterventionCategory, int] = Field(
        default_factory=dict
    )

    @field_validator("valence", mode="before")
    @classmethod
    def _clamp_signed(cls, v):
        return _clamp(v, -1.0, 1.0)

    @field_validator("last_intervention_outcome", mode="before")
    @classmethod
    def _clamp_optional_signed(cls, v):
        return None if v is None else _clamp(v, -1.0, 1.0)

    @field_validator(
        "arousal",
        "dominance",
        "emotional_stability",
        "cognitive_flexibility",
        "insight_level",
        "energy_level",
        "coping_capacity",
        "social_support",
        "risk_level",
        "crisis_proximity",
        "completion_rate",
        "engagement_score",
        "intervention_fatigue",
        mode="before",
    )
    @classmethod
    def _clamp_unit(cls, v):
        return _clamp(v, 0.0, 1.0)

    @field_validator("hour_of_day", mode="before")
    @classmethod
    def _clamp_hour(cls, v):
        return int(_clamp(v, 0, 23))

    @field_validator("day_of_week", mode="before")
    @classmethod
    def _clamp_day(cls, v):
        return int(_clamp(v, 0, 6))

    @property
    def risk_bucket(self) -> int:
        """Risk discretized to 0..5 (floor(risk * 5))."""
        return int(_clamp(int(self.risk_level * 5), 0, 5))

    def to_feature_vector(self) -> dict[str, float]:
        """Fixed 16-dimensional feature vector used by contextual arms."""
        return {
            "valence": self.valence,
            "arousal": self.arousal,
            "dominance": self.dominance,
            "emotional_stability": self.emotional_stability,
            "mood_trend_improving": 1.0 if self.mood_trend == MoodTrend.IMPROVING else 0.0,
            "mood_trend_declining": 1.0 if self.mood_trend == MoodTrend.DECLINING else 0.0,
            "energy_level": self.energy_level,
            "coping_capacity": self.coping_capacity,
            "social_support": self.social_support,
            "risk_level": self.risk_level,
            "hour_normalized": self.hour_of_day / 24,
            "day_of_week_normalized": self.day_of_week / 7,
            "completion_rate": self.completion_rate,
            "engagement_score": self.engagement_score,
            "intervention_fatigue": self.intervention_fatigue,
            "bias": 1.0,
        }
