from .settings import ExchangeSettings, settings, get_settings

__all__ = ["ExchangeSettings", "settings", "get_settings"]
