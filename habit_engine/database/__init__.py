from habit_engine.database.backup import BackupManager
from habit_engine.database.storage import (
    JsonFileStorage,
    MemoryStorage,
    SlotStorage,
    StorageCorruptionError,
    StorageError,
    create_storage,
)

__all__ = [
    'BackupManager',
    'JsonFileStorage',
    'MemoryStorage',
    'SlotStorage',
    'StorageCorruptionError',
    'StorageError',
    'create_storage',
]
