"""
Profile Name Dialog
Shown when creating, renaming or duplicating a profile.
Validates the name live with the same rules the core enforces.
"""

from __future__ import annotations
from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QFormLayout, QLineEdit,
    QCheckBox, QDialogButtonBox, QLabel,
)

from core.errors import ValidationError
from core.profile_manager import validate_name


class ProfileNameDialog(QDialog):
    """
    Modal dialog asking for a profile name.
    On accept, the validated name is available via .name and, for new
    profiles, .seed_from_live tells whether to copy the current hosts file.
    """

    def __init__(
        self,
        parent=None,
        title: str = "New Profile",
        initial: str = "",
        existing_names: list[str] | None = None,
        offer_seed: bool = False,
    ):
        super().__init__(parent)
        self.existing_names = set(existing_names or [])
        self.name = ""
        self.seed_from_live = False
        self.setWindowTitle(title)
        self.setMinimumWidth(380)
        self.setModal(True)
        self._build_ui(initial, offer_seed)

    def _build_ui(self, initial: str, offer_seed: bool):
        layout = QVBoxLayout(self)
        layout.setSpacing(14)
        layout.setContentsMargins(20, 20, 20, 20)

        form = QFormLayout()
        self.name_edit = QLineEdit(initial)
        self.name_edit.setPlaceholderText("e.g. work, home, staging...")
        self.name_edit.setMaxLength(64)
        self.name_edit.textChanged.connect(self._on_text_changed)
        form.addRow("Profile name:", self.name_edit)
        layout.addLayout(form)

        self.seed_cb = QCheckBox("Start from the current system hosts file")
        self.seed_cb.setVisible(offer_seed)
        layout.addWidget(self.seed_cb)

        self.error_label = QLabel("")
        self.error_label.setStyleSheet("color: #e05c5c; font-size: 12px;")
        self.error_label.setWordWrap(True)
        layout.addWidget(self.error_label)

        self.buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel
        )
        self.buttons.accepted.connect(self._on_accept)
        self.buttons.rejected.connect(self.reject)
        layout.addWidget(self.buttons)

        self.name_edit.selectAll()
        self._on_text_changed(initial)

    def _check(self, text: str) -> str:
        name = validate_name(text)
        if name in self.existing_names:
            raise ValidationError(f"A profile named '{name}' already exists.")
        return name

    def _on_text_changed(self, text: str):
        ok_btn = self.buttons.button(QDialogButtonBox.StandardButton.Ok)
        try:
            self._check(text)
        except ValidationError as e:
            # Don't nag before the user has typed anything
            self.error_label.setText(str(e) if text else "")
            ok_btn.setEnabled(False)
            return
        self.error_label.setText("")
        ok_btn.setEnabled(True)

    def _on_accept(self):
        try:
            self.name = self._check(self.name_edit.text())
        except ValidationError as e:
            self.error_label.setText(str(e))
            return
        self.seed_from_live = self.seed_cb.isVisible() and self.seed_cb.isChecked()
        self.accept()
