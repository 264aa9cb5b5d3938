from .loader import ConfigLoader, LoadedConfig

__all__ = ["ConfigLoader", "LoadedConfig"]
