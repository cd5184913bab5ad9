from campaign_manager.models.base import Base  # noqa: F401
from campaign_manager.models.combat import Combat, CombatPhase  # noqa: F401
from campaign_manager.models.initiative import Initiative  # noqa: F401
