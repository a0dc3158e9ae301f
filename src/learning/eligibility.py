"""
Eligibility filter.

Prunes the candidate pool against each intervention's preconditions and
contraindications and the user's profile before any arm is scored.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from src.learning.errors import NoEligibleInterventionsError
from src.learning.store import DecisionLog
from src.models.config import OptimizerConfig
from src.models.context import ContextualFeatures
from src.models.intervention import Intervention, time_of_day_for_hour
from src.models.profile import UserInterventionProfile


logger = logging.getLogger(__name__)


def start_of_day(now: datetime) -> datetime:
    """Local midnight of the day containing ``now``."""
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


class EligibilityFilter:
    """
    Decides which interventions may be delivered in a given context.

    Reads the decision log for per-category daily caps and the profile for
    inter-delivery intervals, learned avoidances and prior deliveries.
    """

    def __init__(
        self,
        decision_log: DecisionLog,
        config: OptimizerConfig,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.decision_log = decision_log
        self.config = config
        self.clock = clock

    def filter(
        self,
        interventions: list[Intervention],
        context: ContextualFeatures,
        profile: UserInterventionProfile,
        strict: bool = True,
    ) -> list[Intervention]:
        """
        Filter the candidate pool.

        Args:
            interventions: All candidates
            context: Current context
            profile: The user's profile
            strict: Raise when nothing survives

        Returns:
            Eligible interventions, in input order

        Raises:
            NoEligibleInterventionsError: strict mode and an empty result
        """
        now = self.clock()
        eligible = []
        for intervention in interventions:
            reason = self.rejection_reason(intervention, context, profile, now)
            if reason is None:
                eligible.append(intervention)
            else:
                logger.debug(f"Excluded {intervention.id}: {reason}")

        if strict and not eligible:
            raise NoEligibleInterventionsError()
        return eligible

    def rejection_reason(
        self,
        intervention: Intervention,
        context: ContextualFeatures,
        profile: UserInterventionProfile,
        now: Optional[datetime] = None,
    ) -> Optional[str]:
        """Return why an intervention is ineligible, or None if it is eligible."""
        now = now or self.clock()

        if not intervention.is_active:
            return "inactive"

        pre = intervention.preconditions
        if pre.min_valence is not None and context.valence < pre.min_valence:
            return "valence below minimum"
        if pre.max_valence is not None and context.valence > pre.max_valence:
            return "valence above maximum"
        if pre.min_arousal is not None and context.arousal < pre.min_arousal:
            return "arousal below minimum"
        if pre.max_arousal is not None and context.arousal > pre.max_arousal:
            return "arousal above maximum"
        if pre.min_energy is not None and context.energy_level < pre.min_energy:
            return "energy below minimum"

        if pre.max_risk_level is not None and context.risk_bucket > pre.max_risk_level.index:
            return f"risk bucket {context.risk_bucket} above {pre.max_risk_level.value}"

        if pre.allowed_time_of_day:
            current = time_of_day_for_hour(context.hour_of_day)
            if current not in pre.allowed_time_of_day:
                return f"not allowed in the {current.value}"

        if (
            pre.min_sessions_completed is not None
            and context.sessions_total_lifetime < pre.min_sessions_completed
        ):
            return "not enough prior sessions"

        if (
            pre.required_time_available is not None
            and context.time_available_seconds is not None
            and context.time_available_seconds < pre.required_time_available
        ):
            return "not enough time available"

        for required_id in pre.required_prior_interventions:
            stats = profile.intervention_stats.get(required_id)
            if stats is None or stats.delivery_count == 0:
                return f"requires prior intervention {required_id}"

        contra = intervention.contraindications
        if contra.crisis_state and context.risk_level > self.config.crisis_risk_threshold:
            return "contraindicated in crisis"
        if contra.user_declined:
            return "declined by user"
        if context.current_emotion and context.current_emotion in contra.avoid_emotions:
            return f"contraindicated for emotion {context.current_emotion}"
        if context.primary_distortion and context.primary_distortion in contra.avoid_with_distortions:
            return f"contraindicated for distortion {context.primary_distortion}"

        if contra.max_daily_interventions is not None:
            delivered_today = self.decision_log.count_delivered_since(
                profile.user_id, start_of_day(now), category=intervention.category
            )
            if delivered_today >= contra.max_daily_interventions:
                return "daily category cap reached"

        if contra.min_time_since_last_intervention is not None and profile.last_intervention_at:
            elapsed = (now - profile.last_intervention_at).total_seconds()
            if elapsed < contra.min_time_since_last_intervention:
                return "minimum interval not elapsed"

        if profile.is_category_excluded(intervention.category):
            return "category avoided by user"

        return None
