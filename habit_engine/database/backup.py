#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Habit Engine - Backup Manager
Rotating gzip copies of the storage file
"""

import gzip
import shutil
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class BackupManager:
    """Keeps the newest `max_backups` compressed copies of a file"""

    def __init__(self, backup_dir: Path, max_backups: int = 10):
        self.backup_dir = Path(backup_dir)
        self.max_backups = max_backups
        self.backup_dir.mkdir(parents=True, exist_ok=True)

    def create_backup(self, source_file: Path) -> Optional[Path]:
        """Compress source_file into the backup directory.

        Returns None when there is nothing to back up or the copy failed;
        a failed backup never blocks the write that triggered it.
        """
        if not source_file.exists():
            logger.debug(f"Source file {source_file} does not exist, nothing to back up")
            return None

        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S_%f')
        backup_path = self.backup_dir / f"backup_{timestamp}.json.gz"

        try:
            with open(source_file, 'rb') as f_in:
                with gzip.open(backup_path, 'wb') as f_out:
                    shutil.copyfileobj(f_in, f_out)
        except OSError as e:
            logger.error(f"Failed to create backup of {source_file}: {e}")
            if backup_path.exists():
                backup_path.unlink()
            return None

        logger.info(f"Backup created: {backup_path}")
        self._cleanup_old_backups()
        return backup_path

    def restore_backup(self, backup_path: Path, target_file: Path) -> bool:
        """Decompress backup_path over target_file"""
        if not backup_path.exists():
            logger.error(f"Backup file {backup_path} does not exist")
            return False

        try:
            with gzip.open(backup_path, 'rb') as f_in:
                with open(target_file, 'wb') as f_out:
                    shutil.copyfileobj(f_in, f_out)
        except (OSError, EOFError) as e:
            logger.error(f"Failed to restore backup {backup_path}: {e}")
            return False

        logger.info(f"Backup restored from {backup_path} to {target_file}")
        return True

    def list_backups(self) -> List[Dict[str, Any]]:
        """Backups, newest first"""
        backups = []

        for backup_file in self._backup_files():
            stat = backup_file.stat()
            backups.append({
                'name': backup_file.name,
                'path': backup_file,
                'size_bytes': stat.st_size,
                'created': datetime.fromtimestamp(stat.st_mtime).isoformat(),
            })

        return backups

    def _backup_files(self) -> List[Path]:
        # Timestamped names sort chronologically
        return sorted(self.backup_dir.glob("backup_*.json.gz"), key=lambda p: p.name, reverse=True)

    def _cleanup_old_backups(self) -> None:
        for backup in self._backup_files()[self.max_backups:]:
            try:
                backup.unlink()
                logger.info(f"Removed old backup: {backup}")
            except OSError as e:
                logger.warning(f"Failed to remove old backup {backup}: {e}")
