"""Engine configuration."""

from opportunity.config.settings import OpportunitySettings, settings

__all__ = ["OpportunitySettings", "settings"]
