"""
Intervention catalog models.

An Intervention is an immutable catalog entry: what the exercise is, when it
may be delivered (preconditions) and when it must not be (contraindications).
Changes go through ``model_copy(update=...)`` so the catalog never holds a
half-edited record.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.models.enums import (
    DeliveryModality,
    EvidenceLevel,
    InterventionCategory,
    InterventionIntensity,
    OutcomeType,
    RiskLevel,
    TherapeuticMechanism,
    TimeOfDay,
)


# Category metadata shown to operators and explanation collaborators
INTERVENTION_CATEGORIES: dict[InterventionCategory, dict[str, str]] = {
    InterventionCategory.COGNITIVE_RESTRUCTURING: {
        "name": "Cognitive Restructuring",
        "description": "Challenge and reframe unhelpful thoughts",
        "evidence_base": "CBT core technique, extensive RCT support",
    },
    InterventionCategory.BEHAVIORAL_ACTIVATION: {
        "name": "Behavioral Activation",
        "description": "Increase engagement in valued activities",
        "evidence_base": "Strong evidence for depression (Dimidjian et al., 2006)",
    },
    InterventionCategory.MINDFULNESS: {
        "name": "Mindfulness",
        "description": "Present-moment awareness without judgment",
        "evidence_base": "MBCT prevents depression relapse (Segal et al., 2010)",
    },
    InterventionCategory.PSYCHOEDUCATION: {
        "name": "Psychoeducation",
        "description": "Information about mental health and coping",
        "evidence_base": "Foundation of most evidence-based treatments",
    },
    InterventionCategory.SOCIAL_SUPPORT: {
        "name": "Social Support",
        "description": "Connection with others for emotional support",
        "evidence_base": "Strong protective factor (Cohen & Wills, 1985)",
    },
    InterventionCategory.CRISIS_INTERVENTION: {
        "name": "Crisis Intervention",
        "description": "Immediate safety and stabilization",
        "evidence_base": "Essential for acute risk management",
    },
    InterventionCategory.DISTRESS_TOLERANCE: {
        "name": "Distress Tolerance",
        "description": "Skills to survive crisis without making things worse",
        "evidence_base": "DBT core module (Linehan, 1993)",
    },
    InterventionCategory.EMOTION_REGULATION: {
        "name": "Emotion Regulation",
        "description": "Skills to understand and manage emotions",
        "evidence_base": "DBT core module, transdiagnostic relevance",
    },
    InterventionCategory.INTERPERSONAL_EFFECTIVENESS: {
        "name": "Interpersonal Effectiveness",
        "description": "Skills for healthy relationships",
        "evidence_base": "DBT core module",
    },
    InterventionCategory.PHYSICAL_WELLNESS: {
        "name": "Physical Wellness",
        "description": "Exercise, sleep, and nutrition for mental health",
        "evidence_base": "Exercise comparable to antidepressants (Blumenthal et al., 2007)",
    },
    InterventionCategory.GOAL_SETTING: {
        "name": "Goal Setting",
        "description": "Setting and working toward meaningful goals",
        "evidence_base": "Motivational Interviewing, Self-Determination Theory",
    },
    InterventionCategory.SELF_COMPASSION: {
        "name": "Self-Compassion",
        "description": "Kindness toward oneself in difficult moments",
        "evidence_base": "Neff research, reduces depression and anxiety",
    },
    InterventionCategory.GRATITUDE: {
        "name": "Gratitude",
        "description": "Appreciating positive aspects of life",
        "evidence_base": "Positive psychology intervention (Emmons & McCullough, 2003)",
    },
    InterventionCategory.VALUES_CLARIFICATION: {
        "name": "Values Clarification",
        "description": "Identifying what matters most",
        "evidence_base": "ACT core process (Hayes et al., 2006)",
    },
    InterventionCategory.ACCEPTANCE: {
        "name": "Acceptance",
        "description": "Making room for difficult experiences",
        "evidence_base": "ACT core process, alternative to avoidance",
    },
    InterventionCategory.EXPOSURE: {
        "name": "Exposure",
        "description": "Gradual approach to feared situations",
        "evidence_base": "Gold standard for anxiety disorders",
    },
    InterventionCategory.PROBLEM_SOLVING: {
        "name": "Problem Solving",
        "description": "Structured approach to solving problems",
        "evidence_base": "PST effective for depression (Cuijpers et al., 2007)",
    },
}


# Hour ranges [start, end) for each time-of-day bucket
TIME_OF_DAY_HOURS: dict[TimeOfDay, tuple[int, int]] = {
    TimeOfDay.EARLY_MORNING: (5, 7),
    TimeOfDay.MORNING: (7, 12),
    TimeOfDay.MIDDAY: (12, 14),
    TimeOfDay.AFTERNOON: (14, 17),
    TimeOfDay.EVENING: (17, 21),
    TimeOfDay.NIGHT: (21, 24),
    TimeOfDay.LATE_NIGHT: (0, 5),
}


def time_of_day_for_hour(hour: int) -> TimeOfDay:
    """Map an hour (0-23) onto its time-of-day bucket."""
    hour = int(hour) % 24
    for time_of_day, (start, end) in TIME_OF_DAY_HOURS.items():
        if start <= hour < end:
            return time_of_day
    return TimeOfDay.NIGHT


class InterventionPreconditions(BaseModel):
    """State conditions required before an intervention is eligible."""

    min_valence: Optional[float] = None
    max_valence: Optional[float] = None
    min_arousal: Optional[float] = None
    max_arousal: Optional[float] = None
    min_energy: Optional[float] = None
    max_risk_level: Optional[RiskLevel] = None
    required_time_available: Optional[float] = Field(
        default=None, description="Seconds the user must have available"
    )
    allowed_time_of_day: list[TimeOfDay] = Field(default_factory=list)
    min_sessions_completed: Optional[int] = None
    required_prior_interventions: list[str] = Field(default_factory=list)
    target_distortions: list[str] = Field(default_factory=list)


class InterventionContraindications(BaseModel):
    """When an intervention must NOT be delivered."""

    crisis_state: bool = False
    avoid_emotions: list[str] = Field(default_factory=list)
    max_daily_interventions: Optional[int] = Field(
        default=None, description="Per-category cap for one user per local day"
    )
    min_time_since_last_intervention: Optional[float] = Field(
        default=None, description="Seconds since the user's last intervention"
    )
    avoid_with_distortions: list[str] = Field(default_factory=list)
    user_declined: bool = False


class LocalizedContent(BaseModel):
    """Exercise text in a single language."""

    introduction: str = ""
    main_content: str = ""
    steps: list[str] = Field(default_factory=list)
    reflection_prompts: list[str] = Field(default_factory=list)
    closing: str = ""
    quick_version: Optional[str] = None


class Intervention(BaseModel):
    """A therapeutic exercise in the catalog."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique intervention ID")
    name: str = ""
    description: str = ""
    category: InterventionCategory
    intensity: InterventionIntensity = InterventionIntensity.BRIEF
    modality: DeliveryModality = DeliveryModality.TEXT_MESSAGE
    estimated_duration_seconds: int = 120

    preconditions: InterventionPreconditions = Field(
        default_factory=InterventionPreconditions
    )
    contraindications: InterventionContraindications = Field(
        default_factory=InterventionContraindications
    )

    # Language code -> content
    content: dict[str, LocalizedContent] = Field(default_factory=dict)
    mechanisms: list[TherapeuticMechanism] = Field(default_factory=list)
    target_outcomes: list[OutcomeType] = Field(default_factory=list)
    evidence_level: EvidenceLevel = EvidenceLevel.EXPERT_CONSENSUS

    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
    is_active: bool = True

    def patched(
        self,
        updates: dict[str, Any],
        updated_at: Optional[datetime] = None,
    ) -> "Intervention":
        """
        Return a copy with ``updates`` applied. The id never changes.

        Args:
            updates: Field values to replace
            updated_at: Timestamp for the change (now when omitted)
        """
        data = self.model_dump()
        data.update({k: v for k, v in updates.items() if k != "id"})
        data["updated_at"] = updated_at or datetime.now()
        return Intervention.model_validate(data)


def default_crisis_intervention() -> Intervention:
    """Hardcoded safety message used when no crisis intervention is registered."""
    return Intervention(
        id="crisis_default",
        name="Crisis Support",
        description="Immediate crisis support and safety resources",
        category=InterventionCategory.CRISIS_INTERVENTION,
        intensity=InterventionIntensity.STANDARD,
        modality=DeliveryModality.TEXT_MESSAGE,
        estimated_duration_seconds=300,
        content={
            "en": LocalizedContent(
                introduction="I notice you may be going through a difficult time.",
                main_content=(
                    "Your safety is the most important thing right now. "
                    "You are not alone."
                ),
                closing=(
                    "Please reach out to a crisis helpline if you need "
                    "immediate support."
                ),
                quick_version="You are not alone. Help is available.",
            ),
            "ru": LocalizedContent(
                introduction="Я заметил, что тебе сейчас может быть тяжело.",
                main_content="Твоя безопасность сейчас важнее всего. Ты не один.",
                closing=(
                    "Пожалуйста, позвони на горячую линию, если тебе нужна "
                    "срочная помощь: 8-800-2000-122"
                ),
                quick_version="Ты не один. Помощь доступна.",
            ),
        },
        mechanisms=[
            TherapeuticMechanism.EMOTIONAL_PROCESSING,
            TherapeuticMechanism.SOCIAL_CONNECTION,
        ],
        target_outcomes=[OutcomeType.CRISIS_AVERTED, OutcomeType.ENGAGEMENT],
        evidence_level=EvidenceLevel.EXPERT_CONSENSUS,
    )
