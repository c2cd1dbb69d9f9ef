"""
Domain exceptions. Raised by use cases and adapters where the caller is
expected to translate them (the FastAPI entry point maps them to HTTP codes).
Provider failures on the dashboard data path are not exceptions; see
FetchResult.
"""


class TickerboardError(Exception):
    """Base class for all tickerboard errors."""


class ConfigStoreError(TickerboardError):
    """The configuration document could not be written."""


class MusicNotConfiguredError(TickerboardError):
    """Music-provider client credentials are missing."""


class MusicAuthError(TickerboardError):
    """The music provider rejected the supplied access token."""


class MusicProviderError(TickerboardError):
    """The music provider call failed for any other reason."""
