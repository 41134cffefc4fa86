#!/usr/bin/env python3
"""
PROPSORT ENGINE - File Orchestrator
-----------------------------------
SortEngine applies CoreProcessor to files inside a workspace. It
detects each file's type from its extension, writes results atomically
behind a unique backup, and walks directories with a depth gate.

Author: PropSort Team
Date: 2026-10-18
"""

import os
import shutil
import time
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional

from propsort.core.options import EXTENSION_MAP, SortOptions, detect_file_type
from propsort.core.processor import CoreProcessor

# Setup standardized logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("propsort.engine")

BACKUP_SUFFIX = ".propsort.backup"
TEMP_SUFFIX = ".propsort.tmp"


class SortEngine:
    """
    Sorts files relative to a workspace root. Options given here are the
    base for every file; the file type is always taken from the file.
    """

    def __init__(self, workspace_path: str, options: Optional[Mapping[str, Any]] = None):
        self.workspace = Path(workspace_path).resolve()
        self.options = dict(options or {})
        self.processor = CoreProcessor()
        if not self.workspace.exists():
            raise FileNotFoundError(f"Workspace does not exist: {self.workspace}")

    def options_for(self, path: Path) -> SortOptions:
        return SortOptions.for_file(str(path), self.options)

    def sort_file(self, relative_path: str, dry_run: bool = True) -> Dict[str, Any]:
        """
        Runs one file through the processor. With dry_run the file is
        left alone and the would-be content is returned.
        """
        full_path = (self.workspace / relative_path).resolve()

        if not full_path.exists():
            return self._file_error(relative_path, "FILE_NOT_FOUND", f"Path missing: {full_path}")
        if full_path.suffix.lower() not in EXTENSION_MAP:
            return self._file_error(relative_path, "UNSUPPORTED", f"No sorter for '{full_path.suffix}' files")

        try:
            # Phase 1: Read (BOM-aware, line endings untranslated)
            with open(full_path, "r", encoding="utf-8-sig", newline="") as handle:
                raw_text = handle.read()

            # Phase 2: Process
            options = self.options_for(full_path)
            outcome = self.processor.process_text(raw_text, options)
        except Exception as e:
            logger.error(f"Engine failure on {relative_path}: {e}")
            return self._file_error(relative_path, "ENGINE_ERROR", str(e))

        new_text = outcome.processed_text if outcome.success else None
        is_modified = new_text is not None and new_text != raw_text

        result = {
            "file_path": relative_path,
            "file_type": options.file_type,
            "status": self._derive_status(is_modified, dry_run, outcome.success),
            "success": outcome.success,
            "entities": outcome.entities_processed,
            "errors": list(outcome.errors),
            "warnings": list(outcome.warnings),
            "original_content": raw_text,
            "sorted_content": new_text if new_text is not None else raw_text,
            "modified": is_modified,
            "written": False,
            "backup_created": None,
            "timestamp": time.time(),
        }

        # Execution (Disk I/O)
        if not dry_run and is_modified:
            backup_path = self._create_unique_backup(full_path)
            try:
                shutil.copy2(full_path, backup_path)
                result["backup_created"] = str(backup_path.relative_to(self.workspace))
            except OSError as e:
                result["backup_warning"] = f"Backup failed: {e}"

            try:
                self._atomic_write(full_path, new_text)
                result["written"] = True
                logger.info(f"Sorted {relative_path}")
            except IOError as e:
                result["write_error"] = str(e)
                result["success"] = False
                result["status"] = "FAILED"

        return result

    def scan_directory(self, extensions: Optional[List[str]] = None, dry_run: bool = True,
                       max_depth: int = 10,
                       progress_callback: Optional[Callable[[int, int], None]] = None) -> List[Dict[str, Any]]:
        """
        Recursively discovers and sorts every file with one of the given
        extensions (all supported extensions by default).
        """
        try:
            max_depth = int(max_depth)
        except (ValueError, TypeError):
            logger.warning(f"Invalid max_depth '{max_depth}'. Falling back to default: 10")
            max_depth = 10

        wanted = {self._normalize_ext(e) for e in (extensions or EXTENSION_MAP)}

        # Phase 1: File Discovery (Exclude symlinks to prevent loops)
        all_files = sorted(
            f for f in self.workspace.rglob("*")
            if f.is_file() and not f.is_symlink() and f.suffix.lower() in wanted
        )
        all_files = [f for f in all_files if len(f.relative_to(self.workspace).parts) <= max_depth]

        total_files = len(all_files)
        reports = []

        # Phase 2: Processing Loop
        for processed, file_path in enumerate(all_files, start=1):
            rel_path = str(file_path.relative_to(self.workspace))
            reports.append(self.sort_file(rel_path, dry_run=dry_run))
            if progress_callback:
                progress_callback(processed, total_files)

        logger.info(f"Scanned {total_files} files under {self.workspace}")
        return reports

    def cleanup_backups(self, max_age_hours: int = 168) -> int:
        """Removes old backup files (default 7 days)."""
        count = 0
        cutoff = time.time() - (max_age_hours * 3600)
        for backup in self.workspace.rglob(f"*{BACKUP_SUFFIX}"):
            try:
                if backup.stat().st_mtime < cutoff:
                    backup.unlink()
                    count += 1
            except OSError as e:
                logger.warning(f"Could not remove {backup}: {e}")
        return count

    def generate_summary(self, reports: List[Dict[str, Any]]) -> Dict[str, Any]:
        if not reports:
            return {
                "total_files": 0, "success_rate": 0, "successful": 0, "unsorted": 0,
                "written_to_disk": 0, "system_errors": 0, "backups_created": 0,
            }

        total = len(reports)
        successful = sum(1 for r in reports if r.get("success", False))

        return {
            "total_files": total,
            "success_rate": successful / total,
            "successful": successful,
            "unsorted": sum(1 for r in reports if r.get("status") == "PREVIEW"),
            "written_to_disk": sum(1 for r in reports if r.get("written", False)),
            "backups_created": sum(1 for r in reports if r.get("backup_created") is not None),
            "system_errors": sum(1 for r in reports if r.get("status") == "ENGINE_ERROR"),
            "summary_timestamp": time.strftime("%Y-%m-%d %H:%M:%S"),
        }

    def _derive_status(self, modified: bool, dry: bool, success: bool) -> str:
        if not success:
            return "FAILED"
        if not modified:
            return "UNCHANGED"
        return "PREVIEW" if dry else "SORTED"

    def _atomic_write(self, target_path: Path, content: str):
        if not os.access(target_path.parent, os.W_OK):
            raise PermissionError(f"No write access to {target_path.parent}")
        temp_file = target_path.with_name(target_path.name + TEMP_SUFFIX)
        try:
            # newline='' keeps the line endings the processor produced
            with open(temp_file, "w", encoding="utf-8", newline="") as handle:
                handle.write(content)
            os.replace(temp_file, target_path)
        except OSError as e:
            if temp_file.exists():
                temp_file.unlink()
            raise IOError(f"Atomic write failed: {e}") from e

    def _create_unique_backup(self, target_path: Path) -> Path:
        backup_path = target_path.with_name(target_path.name + BACKUP_SUFFIX)
        counter = 1
        while backup_path.exists():
            backup_path = target_path.with_name(f"{target_path.name}-{counter}{BACKUP_SUFFIX}")
            counter += 1
        return backup_path

    @staticmethod
    def _normalize_ext(ext: str) -> str:
        ext = ext.lower()
        return ext if ext.startswith(".") else f".{ext}"

    def _file_error(self, path: str, status: str, error: str) -> Dict[str, Any]:
        return {
            "file_path": path, "file_type": detect_file_type(path), "status": status,
            "success": False, "errors": [error], "warnings": [], "modified": False,
            "written": False, "backup_created": None,
        }
