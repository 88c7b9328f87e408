"""
Backup Browser
Lists hosts file backups (newest first) with a preview, and lets the user
restore or delete them.
"""

from __future__ import annotations
import logging

from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QLabel, QListWidget,
    QPlainTextEdit, QPushButton, QSplitter, QMessageBox,
)
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QFont

from core.app_context import AppContext
from core.errors import HostsPilotError

logger = logging.getLogger(__name__)


class BackupBrowserDialog(QDialog):
    def __init__(self, parent=None, ctx: AppContext | None = None):
        super().__init__(parent)
        self.ctx = ctx
        self.restored = False
        self.setWindowTitle("Hosts File Backups")
        self.setModal(True)
        self.setMinimumSize(720, 440)
        self._build_ui()
        self._refresh()

    def _build_ui(self):
        layout = QVBoxLayout(self)
        layout.setSpacing(12)
        layout.setContentsMargins(16, 16, 16, 16)

        self.header = QLabel("")
        self.header.setFont(QFont("Segoe UI", 10, QFont.Weight.Medium))
        layout.addWidget(self.header)

        splitter = QSplitter(Qt.Orientation.Horizontal)
        self.backup_list = QListWidget()
        self.backup_list.currentTextChanged.connect(self._on_selected)
        splitter.addWidget(self.backup_list)

        self.preview = QPlainTextEdit()
        self.preview.setReadOnly(True)
        self.preview.setFont(QFont("Consolas", 10))
        splitter.addWidget(self.preview)
        splitter.setSizes([260, 460])
        layout.addWidget(splitter, 1)

        btn_row = QHBoxLayout()
        self.restore_btn = QPushButton("↩  Restore")
        self.restore_btn.setObjectName("success")
        self.restore_btn.clicked.connect(self._on_restore)
        btn_row.addWidget(self.restore_btn)

        self.delete_btn = QPushButton("🗑 Delete")
        self.delete_btn.setObjectName("danger")
        self.delete_btn.clicked.connect(self._on_delete)
        btn_row.addWidget(self.delete_btn)

        self.delete_all_btn = QPushButton("Delete All")
        self.delete_all_btn.setObjectName("danger")
        self.delete_all_btn.clicked.connect(self._on_delete_all)
        btn_row.addWidget(self.delete_all_btn)

        btn_row.addStretch()
        close_btn = QPushButton("Close")
        close_btn.clicked.connect(self.accept)
        btn_row.addWidget(close_btn)
        layout.addLayout(btn_row)

    def _refresh(self):
        try:
            names = self.ctx.backups.list_backups()
        except HostsPilotError as e:
            QMessageBox.warning(self, "Backups", str(e))
            names = []
        self.backup_list.blockSignals(True)
        self.backup_list.clear()
        self.backup_list.addItems(names)
        self.backup_list.blockSignals(False)
        self.header.setText(
            f"{len(names)} backup(s) — the oldest are removed beyond {self.ctx.backups.max_backups}"
        )
        if names:
            self.backup_list.setCurrentRow(0)
        else:
            self._on_selected("")

    def _current(self) -> str:
        item = self.backup_list.currentItem()
        return item.text() if item else ""

    def _on_selected(self, name: str):
        has = bool(name)
        self.restore_btn.setEnabled(has)
        self.delete_btn.setEnabled(has)
        self.delete_all_btn.setEnabled(self.backup_list.count() > 0)
        if not has:
            self.preview.setPlainText("")
            return
        try:
            self.preview.setPlainText(self.ctx.backups.read_backup(name))
        except HostsPilotError as e:
            self.preview.setPlainText(f"⚠ {e}")

    def _on_restore(self):
        name = self._current()
        if not name:
            return
        reply = QMessageBox.question(
            self, "Restore Backup",
            f"Overwrite the system hosts file with '{name}'?\n"
            "The current hosts file will be backed up first.",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.Cancel,
        )
        if reply != QMessageBox.StandardButton.Yes:
            return
        try:
            result = self.ctx.switcher.restore_backup(name)
        except HostsPilotError as e:
            logger.error(f"Restore of {name} failed: {e}")
            QMessageBox.warning(self, "Restore failed", str(e))
            self._refresh()
            return
        self.restored = True
        for w in result.warnings:
            QMessageBox.information(self, "Restored with warnings", w)
        self._refresh()

    def _on_delete(self):
        name = self._current()
        if not name:
            return
        reply = QMessageBox.question(
            self, "Delete Backup", f"Delete backup '{name}'?",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.Cancel,
        )
        if reply != QMessageBox.StandardButton.Yes:
            return
        try:
            self.ctx.backups.delete_backup(name)
        except HostsPilotError as e:
            QMessageBox.warning(self, "Delete failed", str(e))
        self._refresh()

    def _on_delete_all(self):
        reply = QMessageBox.question(
            self, "Delete All Backups",
            "Delete every hosts file backup?\nThis cannot be undone.",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.Cancel,
        )
        if reply != QMessageBox.StandardButton.Yes:
            return
        try:
            self.ctx.backups.delete_all_backups()
        except HostsPilotError as e:
            QMessageBox.warning(self, "Delete failed", str(e))
        self._refresh()
