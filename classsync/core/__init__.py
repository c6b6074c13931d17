from .config_manager import Config

__all__ = ["Config"]
