"""External data sources."""

from betting_overs.data.sofascore import ProviderError, SofaScoreClient

__all__ = ["ProviderError", "SofaScoreClient"]
