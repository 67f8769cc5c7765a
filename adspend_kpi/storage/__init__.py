from .memory_store import AdSpendStore

__all__ = ["AdSpendStore"]
