"""
Intervention Optimizer - Enumerations

Centralized enum definitions for the intervention catalog, outcomes,
decision points and exploration strategies.
"""

from enum import Enum


class InterventionCategory(str, Enum):
    """Clinical taxonomy of interventions."""

    COGNITIVE_RESTRUCTURING = "cognitive_restructuring"  # CBT thought challenges
    BEHAVIORAL_ACTIVATION = "behavioral_activation"  # Activity scheduling
    MINDFULNESS = "mindfulness"  # Grounding, present-moment focus
    PSYCHOEDUCATION = "psychoeducation"
    SOCIAL_SUPPORT = "social_support"
    CRISIS_INTERVENTION = "crisis_intervention"  # Immediate safety response
    DISTRESS_TOLERANCE = "distress_tolerance"  # DBT
    EMOTION_REGULATION = "emotion_regulation"  # DBT
    INTERPERSONAL_EFFECTIVENESS = "interpersonal_effectiveness"  # DBT
    PHYSICAL_WELLNESS = "physical_wellness"
    GOAL_SETTING = "goal_setting"
    SELF_COMPASSION = "self_compassion"
    GRATITUDE = "gratitude"
    VALUES_CLARIFICATION = "values_clarification"  # ACT
    ACCEPTANCE = "acceptance"  # ACT
    EXPOSURE = "exposure"
    PROBLEM_SOLVING = "problem_solving"


class InterventionIntensity(str, Enum):
    """Intensity levels (JITAI framework)."""

    MICRO = "micro"  # <30 seconds
    BRIEF = "brief"  # 1-3 minutes
    STANDARD = "standard"  # 5-10 minutes
    EXTENDED = "extended"  # 15-30 minutes
    INTENSIVE = "intensive"  # >30 minutes


class DeliveryModality(str, Enum):
    """How an intervention reaches the user."""

    TEXT_MESSAGE = "text_message"
    INTERACTIVE_EXERCISE = "interactive_exercise"
    GUIDED_REFLECTION = "guided_reflection"
    AUDIO_GUIDANCE = "audio_guidance"
    IMAGE_PROMPT = "image_prompt"
    VIDEO_CONTENT = "video_content"
    CHATBOT_DIALOGUE = "chatbot_dialogue"
    PEER_CONNECTION = "peer_connection"


class OutcomeType(str, Enum):
    """Outcome measures used for reward modeling."""

    ENGAGEMENT = "engagement"
    COMPLETION = "completion"
    SELF_REPORTED_MOOD = "self_reported_mood"
    MOOD_IMPROVEMENT = "mood_improvement"
    SYMPTOM_REDUCTION = "symptom_reduction"
    BEHAVIORAL_CHANGE = "behavioral_change"
    SKILL_ACQUISITION = "skill_acquisition"
    CRISIS_AVERTED = "crisis_averted"
    USER_RATING = "user_rating"
    RETURN_ENGAGEMENT = "return_engagement"


class DecisionPointType(str, Enum):
    """What caused a decision point (MRT framework)."""

    SCHEDULED = "scheduled"
    EVENT_TRIGGERED = "event_triggered"
    STATE_TRIGGERED = "state_triggered"
    USER_INITIATED = "user_initiated"
    CRISIS_TRIGGERED = "crisis_triggered"
    RANDOM = "random"


class ExplorationStrategy(str, Enum):
    """Arm scoring strategies."""

    THOMPSON_SAMPLING = "thompson_sampling"
    UCB = "ucb"
    EPSILON_GREEDY = "epsilon_greedy"
    BOLTZMANN = "boltzmann"
    GRADIENT_BANDIT = "gradient_bandit"


class TimeOfDay(str, Enum):
    """Time-of-day buckets."""

    EARLY_MORNING = "early_morning"
    MORNING = "morning"
    MIDDAY = "midday"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"
    LATE_NIGHT = "late_night"


class RiskLevel(str, Enum):
    """Ordered risk buckets. Order matters for eligibility comparisons."""

    NONE = "none"
    LOW = "low"
    MODERATE = "moderate"
    ELEVATED = "elevated"
    HIGH = "high"
    CRISIS = "crisis"

    @property
    def index(self) -> int:
        return list(RiskLevel).index(self)


class TherapeuticMechanism(str, Enum):
    """Mechanism of action."""

    COGNITIVE_DEFUSION = "cognitive_defusion"
    BEHAVIORAL_CHANGE = "behavioral_change"
    EMOTIONAL_PROCESSING = "emotional_processing"
    SOCIAL_CONNECTION = "social_connection"
    PHYSIOLOGICAL_REGULATION = "physiological_regulation"
    INSIGHT_GENERATION = "insight_generation"
    SKILL_BUILDING = "skill_building"
    MOTIVATION_ENHANCEMENT = "motivation_enhancement"
    SELF_AWARENESS = "self_awareness"
    VALUES_ALIGNMENT = "values_alignment"


class EvidenceLevel(str, Enum):
    """Strength of the evidence base, strongest first."""

    META_ANALYSIS = "meta_analysis"
    RCT = "rct"
    QUASI_EXPERIMENTAL = "quasi_experimental"
    OBSERVATIONAL = "observational"
    EXPERT_CONSENSUS = "expert_consensus"
    THEORETICAL = "theoretical"


class MoodTrend(str, Enum):
    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"


class UserFeedback(str, Enum):
    """Explicit user feedback on a delivered intervention."""

    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class ArmKind(str, Enum):
    """Discriminant for bandit arm variants."""

    PLAIN = "plain"
    CONTEXTUAL = "contextual"
