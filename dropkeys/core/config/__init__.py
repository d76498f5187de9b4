from dropkeys.core.config.loader import load_config
from dropkeys.core.config.models import DropKeysConfig

__all__ = ["DropKeysConfig", "load_config"]
