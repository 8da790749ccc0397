#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Habit Engine - Slot Storage
Durable key-value storage: each named slot holds one JSON value
"""

import os
import copy
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

from habit_engine.config import HabitEngineSettings
from habit_engine.database.backup import BackupManager
from habit_engine.exceptions import StorageCorruptionError, StorageError

logger = logging.getLogger(__name__)

class SlotStorage(ABC):
    @abstractmethod
    def read(self, slot: str) -> Optional[Any]:
        """Value stored under slot, or None if the slot is absent"""
        pass

    @abstractmethod
    def write(self, slot: str, value: Any) -> None:
        """Replace the value stored under slot"""
        pass

    @abstractmethod
    def delete(self, slot: str) -> bool:
        pass


class MemoryStorage(SlotStorage):
    """Process-local storage; values are copied in and out like a real store"""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._slots: Dict[str, str] = {}
        for slot, value in (initial or {}).items():
            self.write(slot, value)

    def read(self, slot: str) -> Optional[Any]:
        raw = self._slots.get(slot)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageCorruptionError(f"Slot {slot!r} holds invalid JSON: {e}") from e

    def write(self, slot: str, value: Any) -> None:
        try:
            self._slots[slot] = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Value for slot {slot!r} is not serializable: {e}") from e

    def write_raw(self, slot: str, raw: str) -> None:
        """Store a pre-serialized payload as is"""
        self._slots[slot] = raw

    def delete(self, slot: str) -> bool:
        return self._slots.pop(slot, None) is not None


class JsonFileStorage(SlotStorage):
    """All slots in one JSON object file, replaced atomically on every write"""

    def __init__(self, data_file: Path, backup_manager: Optional[BackupManager] = None):
        self.data_file = Path(data_file)
        self.backup_manager = backup_manager
        self.data_file.parent.mkdir(parents=True, exist_ok=True)

    def read(self, slot: str) -> Optional[Any]:
        return copy.deepcopy(self._load_document().get(slot))

    def write(self, slot: str, value: Any) -> None:
        try:
            document = self._load_document()
        except StorageCorruptionError:
            logger.warning(f"Overwriting unreadable storage file {self.data_file}")
            document = {}

        document[slot] = value
        self._save_document(document)

    def delete(self, slot: str) -> bool:
        document = self._load_document()
        if slot not in document:
            return False
        del document[slot]
        self._save_document(document)
        return True

    def _load_document(self, allow_recovery: bool = True) -> Dict[str, Any]:
        if not self.data_file.exists():
            return {}

        try:
            with open(self.data_file, 'r', encoding='utf-8') as f:
                document = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error(f"Storage file {self.data_file} is corrupted: {e}")
            if allow_recovery and self._restore_from_backup():
                return self._load_document(allow_recovery=False)
            raise StorageCorruptionError(f"Storage file {self.data_file} is corrupted: {e}") from e
        except OSError as e:
            raise StorageError(f"Failed to read {self.data_file}: {e}") from e

        if not isinstance(document, dict):
            raise StorageCorruptionError(
                f"Storage file {self.data_file} must hold a JSON object, got {type(document).__name__}"
            )
        return document

    def _restore_from_backup(self) -> bool:
        """Try backups newest first; True once one restores a readable file"""
        if not self.backup_manager:
            return False

        logger.warning("Attempting to recover storage from backups...")
        for backup in self.backup_manager.list_backups():
            if not self.backup_manager.restore_backup(backup['path'], self.data_file):
                continue
            try:
                with open(self.data_file, 'r', encoding='utf-8') as f:
                    json.load(f)
            except (OSError, ValueError) as e:
                logger.warning(f"Backup {backup['name']} is unusable: {e}")
                continue
            logger.info(f"Successfully restored from backup: {backup['name']}")
            return True

        logger.warning("Could not restore storage from any backup")
        return False

    def _save_document(self, document: Dict[str, Any]) -> None:
        temp_file = self.data_file.with_suffix(self.data_file.suffix + '.tmp')

        try:
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(document, f, ensure_ascii=False, indent=2)

            # Make sure what was written parses back
            with open(temp_file, 'r', encoding='utf-8') as f:
                json.load(f)

            if self.backup_manager:
                self.backup_manager.create_backup(self.data_file)

            os.replace(temp_file, self.data_file)
        except (OSError, TypeError, ValueError) as e:
            if temp_file.exists():
                temp_file.unlink()
            raise StorageError(f"Failed to write {self.data_file}: {e}") from e

        logger.debug(f"Storage saved to {self.data_file}")


def create_storage(settings: HabitEngineSettings) -> JsonFileStorage:
    """File storage at settings.data_path, with backups when enabled"""
    backup_manager = None
    if settings.backup_enabled:
        backup_manager = BackupManager(settings.backup_dir, settings.max_backups)
    return JsonFileStorage(settings.data_path, backup_manager)
