from .matching import get_matching_config, get_matching_value
from .settings import Settings, load_settings, settings

__all__ = ["Settings", "load_settings", "settings", "get_matching_config", "get_matching_value"]
