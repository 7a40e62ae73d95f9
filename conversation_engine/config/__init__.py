"""
Configuration for the conversation engine.
"""
from .engine_config import EngineConfig

__all__ = ['EngineConfig']
