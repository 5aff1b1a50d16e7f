from src.platform.types.uuid7 import generate_uuid7

__all__ = ['generate_uuid7']
