"""
HostsPilot — Main Window
PyQt6 GUI.
Layout: left sidebar (profile list) + right panel (hosts editor + actions).
"""

from __future__ import annotations
import logging

from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QListWidget, QListWidgetItem, QLabel, QPushButton,
    QSplitter, QTextEdit, QPlainTextEdit, QGroupBox,
    QMessageBox, QStatusBar, QMenu,
)
from PyQt6.QtCore import Qt, QSize
from PyQt6.QtGui import QFont

from core.app_context import AppContext
from core.errors import HostsPilotError
from core.hosts_file import is_elevated
from core.switcher import OperationResult
from gui.backup_dialog import BackupBrowserDialog
from gui.profile_editor import ProfileNameDialog

logger = logging.getLogger(__name__)

STYLESHEET = """
QMainWindow, QWidget {
    background-color: #101418;
    color: #d0dce4;
    font-family: 'Segoe UI', sans-serif;
    font-size: 13px;
}
QListWidget {
    background-color: #141a20;
    border: none;
    border-right: 1px solid #1f2a33;
    outline: none;
}
QListWidget::item {
    padding: 8px 12px;
    border-bottom: 1px solid #1a232b;
}
QListWidget::item:selected {
    background-color: #1a2e3a;
    color: #7fd4ff;
    border-left: 3px solid #2fa8e0;
}
QPushButton {
    background-color: #1a2a36;
    color: #9fd8ff;
    border: 1px solid #2a5570;
    border-radius: 6px;
    padding: 6px 14px;
}
QPushButton:hover {
    background-color: #22384a;
}
QPushButton:disabled {
    color: #3a4a56;
    border-color: #1f2f3a;
}
QPushButton#primary {
    background-color: #1f5f86;
    color: #ecf7ff;
    font-weight: 600;
}
QPushButton#success {
    background-color: #1a4a34;
    color: #8ff0b8;
    border-color: #2e7a55;
    font-weight: 600;
}
QPushButton#danger {
    background-color: #4a1c1c;
    color: #ffb0b0;
    border-color: #7a3030;
}
QGroupBox {
    border: 1px solid #1f2f3a;
    border-radius: 8px;
    margin-top: 10px;
    padding-top: 8px;
    font-weight: 600;
    color: #7aa8c4;
}
QGroupBox::title {
    subcontrol-origin: margin;
    left: 12px;
    padding: 0 6px;
}
QPlainTextEdit, QTextEdit {
    background-color: #0c1014;
    border: 1px solid #1f2f3a;
    border-radius: 6px;
    color: #c8d8e0;
    font-family: 'Consolas', monospace;
    font-size: 12px;
}
QStatusBar {
    background-color: #0b0f12;
    color: #5a7a8c;
    border-top: 1px solid #1a232b;
}
QLabel#header {
    font-size: 22px;
    font-weight: 700;
    color: #4fbef0;
}
QLabel#subheader {
    font-size: 12px;
    color: #4a6a7c;
}
"""


class ProfileListItem(QListWidgetItem):
    def __init__(self, name: str, active: bool):
        super().__init__()
        self.name = name
        self.active = active
        self.setText(f"  ● {name}" if active else f"    {name}")
        if active:
            self.setToolTip("Active profile (currently in the system hosts file)")
        self.setSizeHint(QSize(0, 36))


class MainWindow(QMainWindow):
    def __init__(self, ctx: AppContext):
        super().__init__()
        self.ctx = ctx
        self.pm = ctx.profiles
        self.settings = ctx.settings
        self._current: str = ""

        self.setWindowTitle("HostsPilot")
        self.setMinimumSize(860, 580)
        self.setStyleSheet(STYLESHEET)

        self._build_ui()
        self._refresh_profile_list()
        self._update_privilege_status()

        geom = self.settings.get("window_geometry", "")
        if geom:
            try:
                self.restoreGeometry(bytes.fromhex(geom))
            except ValueError:
                logger.debug("Ignoring invalid saved window geometry")

    # ------------------------------------------------------------------
    # UI Construction
    # ------------------------------------------------------------------

    def _build_ui(self):
        central = QWidget()
        self.setCentralWidget(central)
        root = QHBoxLayout(central)
        root.setContentsMargins(0, 0, 0, 0)
        root.setSpacing(0)

        splitter = QSplitter(Qt.Orientation.Horizontal)
        splitter.setHandleWidth(2)
        root.addWidget(splitter)
        splitter.addWidget(self._build_sidebar())
        splitter.addWidget(self._build_detail_panel())
        splitter.setSizes([240, 620])
        splitter.setStretchFactor(0, 0)
        splitter.setStretchFactor(1, 1)

        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)
        self.privilege_lbl = QLabel("")
        self.status_bar.addPermanentWidget(self.privilege_lbl)
        self.status_bar.showMessage("Ready")

    def _build_sidebar(self) -> QWidget:
        w = QWidget()
        w.setMinimumWidth(200)
        w.setMaximumWidth(300)
        layout = QVBoxLayout(w)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        logo_area = QWidget()
        logo_layout = QVBoxLayout(logo_area)
        logo_layout.setContentsMargins(14, 14, 14, 12)
        logo_layout.setSpacing(2)
        title_lbl = QLabel("HostsPilot")
        title_lbl.setObjectName("header")
        logo_layout.addWidget(title_lbl)
        sub_lbl = QLabel("Hosts file profile switcher")
        sub_lbl.setObjectName("subheader")
        logo_layout.addWidget(sub_lbl)
        layout.addWidget(logo_area)

        self.profile_list = QListWidget()
        self.profile_list.setFont(QFont("Segoe UI", 10))
        self.profile_list.currentItemChanged.connect(self._on_profile_selected)
        self.profile_list.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        self.profile_list.customContextMenuRequested.connect(self._show_profile_context_menu)
        layout.addWidget(self.profile_list)

        btn_area = QWidget()
        btn_layout = QHBoxLayout(btn_area)
        btn_layout.setContentsMargins(8, 8, 8, 8)

        new_btn = QPushButton("＋ New")
        new_btn.clicked.connect(self._on_new_profile)
        btn_layout.addWidget(new_btn)

        self.dup_btn = QPushButton("⧉ Duplicate")
        self.dup_btn.clicked.connect(self._on_duplicate_profile)
        btn_layout.addWidget(self.dup_btn)

        self.del_btn = QPushButton("🗑 Delete")
        self.del_btn.setObjectName("danger")
        self.del_btn.clicked.connect(self._on_delete_profile)
        btn_layout.addWidget(self.del_btn)

        layout.addWidget(btn_area)
        return w

    def _build_detail_panel(self) -> QWidget:
        w = QWidget()
        layout = QVBoxLayout(w)
        layout.setContentsMargins(20, 16, 20, 12)
        layout.setSpacing(12)

        header_row = QHBoxLayout()
        self.profile_name_lbl = QLabel("Select a profile →")
        self.profile_name_lbl.setFont(QFont("Segoe UI", 16, QFont.Weight.Bold))
        self.profile_name_lbl.setStyleSheet("color: #bfe6ff;")
        header_row.addWidget(self.profile_name_lbl)
        self.active_badge = QLabel("")
        self.active_badge.setStyleSheet("color: #40e080; font-size: 12px;")
        header_row.addWidget(self.active_badge)
        header_row.addStretch()

        self.rename_btn = QPushButton("✏ Rename")
        self.rename_btn.clicked.connect(self._on_rename_profile)
        header_row.addWidget(self.rename_btn)
        layout.addLayout(header_row)

        self.editor = QPlainTextEdit()
        self.editor.setFont(QFont("Consolas", 11))
        self.editor.setLineWrapMode(QPlainTextEdit.LineWrapMode.NoWrap)
        self.editor.modificationChanged.connect(self._on_modification_changed)
        layout.addWidget(self.editor, 1)

        action_row = QHBoxLayout()
        self.save_btn = QPushButton("💾  Save")
        self.save_btn.setObjectName("primary")
        self.save_btn.clicked.connect(self._on_save)
        action_row.addWidget(self.save_btn)

        self.revert_btn = QPushButton("Revert")
        self.revert_btn.clicked.connect(self._load_editor)
        action_row.addWidget(self.revert_btn)

        action_row.addStretch()

        self.activate_btn = QPushButton("▶  Activate Profile")
        self.activate_btn.setObjectName("success")
        self.activate_btn.clicked.connect(self._on_activate)
        action_row.addWidget(self.activate_btn)
        layout.addLayout(action_row)

        backup_group = QGroupBox("System hosts file")
        backup_layout = QHBoxLayout(backup_group)
        view_btn = QPushButton("👁 View Current")
        view_btn.clicked.connect(self._on_view_live)
        backup_layout.addWidget(view_btn)

        backup_now_btn = QPushButton("📦 Backup Now")
        backup_now_btn.clicked.connect(self._on_backup_now)
        backup_layout.addWidget(backup_now_btn)

        browse_btn = QPushButton("🕘 Backups…")
        browse_btn.clicked.connect(self._on_browse_backups)
        backup_layout.addWidget(browse_btn)

        flush_btn = QPushButton("⟳ Flush DNS")
        flush_btn.clicked.connect(self._on_flush_dns)
        backup_layout.addWidget(flush_btn)
        backup_layout.addStretch()
        layout.addWidget(backup_group)

        log_group = QGroupBox("Operation Log")
        log_layout = QVBoxLayout(log_group)
        self.log_text = QTextEdit()
        self.log_text.setReadOnly(True)
        self.log_text.setMaximumHeight(110)
        log_layout.addWidget(self.log_text)
        layout.addWidget(log_group)

        self._set_no_profile()
        return w

    # ------------------------------------------------------------------
    # Profile list management
    # ------------------------------------------------------------------

    def _refresh_profile_list(self, select: str | None = None):
        try:
            names = self.pm.list_profiles()
            active = self.pm.get_active()
        except HostsPilotError as e:
            self._error("Cannot load profiles", e)
            names, active = [], ""

        self.profile_list.blockSignals(True)
        self.profile_list.clear()
        for name in names:
            self.profile_list.addItem(ProfileListItem(name, name == active))
        self.profile_list.blockSignals(False)

        wanted = select or self._current or self.settings.get("last_profile", "")
        for i in range(self.profile_list.count()):
            item = self.profile_list.item(i)
            if isinstance(item, ProfileListItem) and item.name == wanted:
                self.profile_list.setCurrentItem(item)
                break

        if self.profile_list.currentItem() is None:
            if self.profile_list.count() > 0:
                self.profile_list.setCurrentRow(0)
            else:
                self._set_no_profile()

    def _on_profile_selected(self, current: QListWidgetItem, previous: QListWidgetItem):
        if isinstance(previous, ProfileListItem) and not self._confirm_discard():
            self.profile_list.blockSignals(True)
            self.profile_list.setCurrentItem(previous)
            self.profile_list.blockSignals(False)
            return
        if not isinstance(current, ProfileListItem):
            self._set_no_profile()
            return
        self._current = current.name
        self.profile_name_lbl.setText(current.name)
        self.active_badge.setText("● active" if current.active else "")
        for btn in (self.rename_btn, self.dup_btn, self.del_btn, self.activate_btn):
            btn.setEnabled(True)
        self.editor.setEnabled(True)
        self._load_editor()
        self._remember("last_profile", current.name)

    def _set_no_profile(self):
        self._current = ""
        self.profile_name_lbl.setText("Select a profile →")
        self.active_badge.setText("")
        self.editor.setPlainText("")
        self.editor.document().setModified(False)
        self.editor.setEnabled(False)
        for btn in (self.rename_btn, self.dup_btn, self.del_btn, self.activate_btn,
                    self.save_btn, self.revert_btn):
            btn.setEnabled(False)

    def _load_editor(self):
        if not self._current:
            return
        try:
            content = self.pm.read_profile(self._current)
        except HostsPilotError as e:
            self._error("Cannot read profile", e)
            content = ""
        self.editor.setPlainText(content)
        self.editor.document().setModified(False)

    def _on_modification_changed(self, modified: bool):
        self.save_btn.setEnabled(modified and bool(self._current))
        self.revert_btn.setEnabled(modified and bool(self._current))

    def _confirm_discard(self) -> bool:
        """True if there are no unsaved edits or the user agreed to drop them."""
        if not self.editor.document().isModified():
            return True
        reply = QMessageBox.question(
            self, "Unsaved Changes",
            f"Save changes to '{self._current}' first?",
            QMessageBox.StandardButton.Save
            | QMessageBox.StandardButton.Discard
            | QMessageBox.StandardButton.Cancel,
        )
        if reply == QMessageBox.StandardButton.Save:
            return self._on_save()
        return reply == QMessageBox.StandardButton.Discard

    # ------------------------------------------------------------------
    # Profile actions
    # ------------------------------------------------------------------

    def _on_new_profile(self):
        if not self._confirm_discard():
            return
        dlg = ProfileNameDialog(self, title="New Profile",
                                existing_names=self.pm.list_profiles(), offer_seed=True)
        if not dlg.exec():
            return
        try:
            if dlg.seed_from_live:
                name = self.pm.create_profile(dlg.name, self.ctx.hosts_file.read())
            else:
                name = self.pm.create_profile(dlg.name)
        except HostsPilotError as e:
            self._error("Create failed", e)
            return
        self.editor.document().setModified(False)
        self._refresh_profile_list(select=name)
        self._log(f"✅ Created profile '{name}'")

    def _on_duplicate_profile(self):
        if not self._current or not self._confirm_discard():
            return
        src = self._current
        existing = self.pm.list_profiles()
        candidate = f"{src} (copy)"
        n = 2
        while candidate in existing:
            candidate = f"{src} (copy {n})"
            n += 1

        dlg = ProfileNameDialog(self, title="Duplicate Profile", initial=candidate,
                                existing_names=existing)
        if not dlg.exec():
            return
        try:
            name = self.pm.duplicate_profile(src, dlg.name)
        except HostsPilotError as e:
            self._error("Duplicate failed", e)
            return
        self._refresh_profile_list(select=name)
        self._log(f"✅ Duplicated '{src}' → '{name}'")

    def _on_rename_profile(self):
        if not self._current or not self._confirm_discard():
            return
        old = self._current
        others = [n for n in self.pm.list_profiles() if n != old]
        dlg = ProfileNameDialog(self, title=f"Rename — {old}", initial=old, existing_names=others)
        if not dlg.exec() or dlg.name == old:
            return
        try:
            new = self.pm.rename_profile(old, dlg.name)
        except HostsPilotError as e:
            self._error("Rename failed", e)
            return
        self._current = new
        self._refresh_profile_list(select=new)
        self._log(f"✏ Renamed '{old}' → '{new}'")

    def _on_delete_profile(self):
        if not self._current:
            return
        name = self._current
        if self.settings.get("confirm_before_delete", True):
            reply = QMessageBox.question(
                self, "Delete Profile",
                f"Delete profile '{name}'?\nThis cannot be undone.",
                QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.Cancel,
            )
            if reply != QMessageBox.StandardButton.Yes:
                return
        try:
            self.pm.delete_profile(name)
        except HostsPilotError as e:
            self._error("Delete failed", e)
            return
        self.editor.document().setModified(False)
        self._current = ""
        self._refresh_profile_list()
        self._log(f"🗑 Deleted profile '{name}'")

    def _on_save(self) -> bool:
        if not self._current:
            return False
        try:
            self.pm.write_profile(self._current, self.editor.toPlainText())
        except HostsPilotError as e:
            self._error("Save failed", e)
            return False
        self.editor.document().setModified(False)
        self._log(f"💾 Saved '{self._current}'")
        return True

    def _show_profile_context_menu(self, pos):
        item = self.profile_list.itemAt(pos)
        if not isinstance(item, ProfileListItem):
            return
        menu = QMenu(self)
        menu.addAction("▶ Activate", self._on_activate)
        menu.addAction("✏ Rename", self._on_rename_profile)
        menu.addAction("⧉ Duplicate", self._on_duplicate_profile)
        menu.addSeparator()
        menu.addAction("🗑 Delete", self._on_delete_profile)
        menu.exec(self.profile_list.viewport().mapToGlobal(pos))

    # ------------------------------------------------------------------
    # Activation
    # ------------------------------------------------------------------

    def _on_activate(self):
        if not self._current or not self._confirm_discard():
            return
        name = self._current
        if self.settings.get("confirm_before_activate", True):
            reply = QMessageBox.question(
                self, "Activate Profile",
                f"Write profile '{name}' to the system hosts file?\n"
                "The current hosts file will be backed up first.",
                QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.Cancel,
            )
            if reply != QMessageBox.StandardButton.Yes:
                return

        self._log(f"▶ Activating '{name}'...")
        try:
            result = self.ctx.switcher.activate(name)
        except HostsPilotError as e:
            self._error("Activation failed", e)
            self._refresh_profile_list(select=name)
            return
        self._on_operation_done(result)
        self._refresh_profile_list(select=name)

    def _on_operation_done(self, result: OperationResult):
        self._log(f"✅ {result.summary}")
        for w in result.warnings:
            self._log(f"⚠ {w}")
        self.status_bar.showMessage(result.summary)

    # ------------------------------------------------------------------
    # System hosts file / backups
    # ------------------------------------------------------------------

    def _on_view_live(self):
        try:
            content = self.ctx.hosts_file.read()
        except HostsPilotError as e:
            self._error("Cannot read hosts file", e)
            return
        box = QMessageBox(self)
        box.setWindowTitle(str(self.ctx.hosts_file.path))
        box.setText("Current system hosts file:")
        box.setDetailedText(content)
        box.exec()

    def _on_backup_now(self):
        try:
            path = self.ctx.backups.capture()
        except HostsPilotError as e:
            self._error("Backup failed", e)
            return
        self._log(f"📦 Backed up hosts file → {path.name}")

    def _on_browse_backups(self):
        dlg = BackupBrowserDialog(self, ctx=self.ctx)
        dlg.exec()
        if dlg.restored:
            self._log("↩ Restored hosts file from backup")
            self._refresh_profile_list()

    def _on_flush_dns(self):
        try:
            self.ctx.switcher.flush()
        except HostsPilotError as e:
            self._error("DNS flush failed", e)
            return
        self._log("⟳ DNS cache flushed")

    def _update_privilege_status(self):
        if is_elevated():
            self.privilege_lbl.setText("🛡 Elevated")
        else:
            self.privilege_lbl.setText("⚠ Not elevated — activation needs admin rights")

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------

    def _log(self, message: str):
        self.log_text.append(message)
        self.status_bar.showMessage(message.strip())
        logger.info(message.strip())

    def _error(self, title: str, error: Exception):
        self.log_text.append(f"❌ {error}")
        logger.error(f"{title}: {error}")
        QMessageBox.warning(self, title, str(error))

    def _remember(self, key: str, value):
        try:
            self.settings.set(key, value)
        except HostsPilotError as e:
            logger.warning(f"Could not save setting '{key}': {e}")

    # ------------------------------------------------------------------
    # Window lifecycle
    # ------------------------------------------------------------------

    def closeEvent(self, event):
        if not self._confirm_discard():
            event.ignore()
            return
        geom = self.saveGeometry().toHex().data().decode()
        self._remember("window_geometry", geom)
        super().closeEvent(event)
