"""
PyQt6 Credential Manager UI.

List window, editor dialog and context menu over a CredentialStore.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, fields
from typing import Optional

from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGridLayout,
    QLabel, QLineEdit, QPushButton, QCheckBox,
    QTableWidget, QTableWidgetItem, QHeaderView,
    QDialog, QMessageBox, QMenu, QMainWindow,
    QAbstractItemView, QApplication,
)
from PyQt6.QtCore import Qt, pyqtSignal

from .errors import StoreError, ValidationFailed
from .store import CredentialStore, Credential

logger = logging.getLogger(__name__)


@dataclass
class ManagerTheme:
    """Theme configuration for the credential manager."""
    background_color: str = "#1e1e2e"
    foreground_color: str = "#cdd6f4"
    border_color: str = "#313244"
    accent_color: str = "#89b4fa"
    input_background: str = "#313244"
    button_background: str = "#45475a"
    button_hover: str = "#585b70"
    error_color: str = "#f38ba8"
    font_family: str = "Segoe UI, Cantarell, Helvetica, sans-serif"
    font_size: int = 12

    @classmethod
    def from_dict(cls, data: dict) -> ManagerTheme:
        """
        Build a theme from user overrides.

        Unknown keys are logged and skipped. font_size must be an integer,
        everything else a string.

        Raises:
            ValueError: A known key has a value of the wrong type
        """
        known = {f.name for f in fields(cls)}
        overrides = {}
        for key, value in data.items():
            if key not in known:
                logger.warning(f"Ignoring unknown theme key: {key}")
                continue
            expected = int if key == "font_size" else str
            if isinstance(value, bool) or not isinstance(value, expected):
                raise ValueError(f"Theme key {key} must be {expected.__name__}, got {value!r}")
            overrides[key] = value
        return cls(**overrides)

    def to_stylesheet(self) -> str:
        """Generate Qt stylesheet from theme."""
        return f"""
            QWidget {{
                background-color: {self.background_color};
                color: {self.foreground_color};
                font-family: {self.font_family};
                font-size: {self.font_size}px;
            }}

            QLineEdit {{
                background-color: {self.input_background};
                border: 1px solid {self.border_color};
                border-radius: 4px;
                padding: 6px 10px;
                selection-background-color: {self.accent_color};
            }}

            QLineEdit:focus {{
                border-color: {self.accent_color};
            }}

            QPushButton {{
                background-color: {self.button_background};
                border: 1px solid {self.border_color};
                border-radius: 4px;
                padding: 6px 14px;
                min-width: 70px;
            }}

            QPushButton:hover {{
                background-color: {self.button_hover};
                border-color: {self.accent_color};
            }}

            QPushButton[primary="true"] {{
                background-color: {self.accent_color};
                color: {self.background_color};
                font-weight: bold;
            }}

            QTableWidget {{
                border: 1px solid {self.border_color};
                border-radius: 4px;
                gridline-color: {self.border_color};
            }}

            QTableWidget::item:selected {{
                background-color: {self.accent_color};
                color: {self.background_color};
            }}

            QHeaderView::section {{
                background-color: {self.input_background};
                padding: 6px;
                border: none;
                border-bottom: 2px solid {self.accent_color};
                font-weight: bold;
            }}

            QMenu {{
                background-color: {self.input_background};
                border: 1px solid {self.border_color};
            }}

            QMenu::item:selected {{
                background-color: {self.accent_color};
                color: {self.background_color};
            }}

            QLabel[heading="true"] {{
                font-size: {self.font_size + 4}px;
                font-weight: bold;
                color: {self.accent_color};
            }}

            QLabel[subheading="true"] {{
                color: {self.button_hover};
                font-size: {self.font_size - 1}px;
            }}

            QLabel[error="true"] {{
                color: {self.error_color};
            }}
        """


def validate_entry(name: str, password: str) -> None:
    """
    Check editor input before anything touches the store.

    Raises:
        ValidationFailed: Name or password is empty
    """
    if not name.strip():
        raise ValidationFailed("Name is required")
    if not password:
        raise ValidationFailed("Password is required")


class CredentialDialog(QDialog):
    """Dialog for adding/editing a credential. Saves on accept."""

    def __init__(
        self,
        store: CredentialStore,
        parent: QWidget = None,
        theme: ManagerTheme = None,
        credential: Credential = None,
    ):
        super().__init__(parent)
        self.store = store
        self.theme = theme or ManagerTheme()
        self.original_name = credential.name if credential else None
        self.is_edit = credential is not None
        self._setup_ui()

        if credential:
            self._populate_from_credential(credential)

    def _setup_ui(self):
        self.setWindowTitle("Edit Credential" if self.is_edit else "Add Credential")
        self.setMinimumWidth(420)
        self.setStyleSheet(self.theme.to_stylesheet())

        layout = QVBoxLayout(self)
        layout.setSpacing(16)
        layout.setContentsMargins(24, 24, 24, 24)

        form = QGridLayout()
        form.setSpacing(12)

        form.addWidget(QLabel("Name:"), 0, 0)
        self.name_input = QLineEdit()
        self.name_input.setPlaceholderText("e.g., github")
        form.addWidget(self.name_input, 0, 1)

        form.addWidget(QLabel("Username:"), 1, 0)
        self.username_input = QLineEdit()
        self.username_input.setPlaceholderText("Optional")
        form.addWidget(self.username_input, 1, 1)

        form.addWidget(QLabel("Password:"), 2, 0)
        self.password_input = QLineEdit()
        self.password_input.setEchoMode(QLineEdit.EchoMode.Password)
        form.addWidget(self.password_input, 2, 1)

        self.show_password_check = QCheckBox("Show password")
        self.show_password_check.toggled.connect(self._toggle_password_visible)
        form.addWidget(self.show_password_check, 3, 1)

        layout.addLayout(form)

        # Buttons
        btn_layout = QHBoxLayout()
        btn_layout.addStretch()

        cancel_btn = QPushButton("Cancel")
        cancel_btn.clicked.connect(self.reject)
        btn_layout.addWidget(cancel_btn)

        self.save_btn = QPushButton("Save")
        self.save_btn.setProperty("primary", True)
        self.save_btn.setDefault(True)
        self.save_btn.clicked.connect(self._validate_and_accept)
        btn_layout.addWidget(self.save_btn)

        layout.addLayout(btn_layout)

    def _populate_from_credential(self, cred: Credential):
        self.name_input.setText(cred.name)
        self.username_input.setText(cred.username)
        self.password_input.setText(cred.password)

    def _toggle_password_visible(self, visible: bool):
        mode = QLineEdit.EchoMode.Normal if visible else QLineEdit.EchoMode.Password
        self.password_input.setEchoMode(mode)

    def get_credential_data(self) -> dict:
        return {
            "name": self.name_input.text().strip(),
            "username": self.username_input.text(),
            "password": self.password_input.text(),
        }

    def _validate_and_accept(self):
        data = self.get_credential_data()
        try:
            validate_entry(data["name"], data["password"])
        except ValidationFailed as e:
            QMessageBox.warning(self, "Missing Information", str(e))
            return

        try:
            if self.is_edit:
                self.store.replace(self.original_name, **data)
            else:
                self.store.write(**data)
        except StoreError as e:
            logger.error(f"Failed to save credential '{data['name']}': {e}")
            QMessageBox.critical(self, "Error", str(e))
            return

        self.accept()


class CredentialManagerWidget(QWidget):
    """
    Credential list with add / edit / delete / copy actions.

    Signals:
        password_copied: Emitted after a password went to the clipboard
    """

    password_copied = pyqtSignal(str)  # credential name

    def __init__(
        self,
        store: Optional[CredentialStore],
        theme: ManagerTheme = None,
        parent: QWidget = None,
        unavailable_reason: str = "",
    ):
        super().__init__(parent)
        self.store = store
        self.theme = theme or ManagerTheme()
        self._unavailable_reason = unavailable_reason
        self._setup_ui()
        self.refresh()

    def _setup_ui(self):
        self.setStyleSheet(self.theme.to_stylesheet())

        layout = QVBoxLayout(self)
        layout.setSpacing(12)
        layout.setContentsMargins(16, 16, 16, 16)

        # Header
        header_layout = QHBoxLayout()

        title = QLabel("Credentials")
        title.setProperty("heading", True)
        header_layout.addWidget(title)

        header_layout.addStretch()

        self.add_btn = QPushButton("Add")
        self.add_btn.setProperty("primary", True)
        self.add_btn.clicked.connect(self.add_credential)
        header_layout.addWidget(self.add_btn)

        self.refresh_btn = QPushButton("Refresh")
        self.refresh_btn.clicked.connect(self.refresh)
        header_layout.addWidget(self.refresh_btn)

        layout.addLayout(header_layout)

        # Credentials table - password is never a column
        self.table = QTableWidget()
        self.table.setColumnCount(2)
        self.table.setHorizontalHeaderLabels(["Name", "Username"])
        self.table.horizontalHeader().setSectionResizeMode(0, QHeaderView.ResizeMode.Stretch)
        self.table.horizontalHeader().setSectionResizeMode(1, QHeaderView.ResizeMode.Stretch)
        self.table.verticalHeader().setVisible(False)
        self.table.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        self.table.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        self.table.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        self.table.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        self.table.customContextMenuRequested.connect(self._show_context_menu)
        self.table.doubleClicked.connect(lambda _index: self._edit_selected())

        layout.addWidget(self.table)

        # Status line
        self.status_label = QLabel()
        self.status_label.setProperty("subheading", True)
        layout.addWidget(self.status_label)

    # -------------------------------------------------------------------------
    # List
    # -------------------------------------------------------------------------

    def refresh(self) -> None:
        """Rebuild every row from the store."""
        self.table.setRowCount(0)

        if self.store is None:
            self.add_btn.setEnabled(False)
            self._set_status(f"Credential store unavailable: {self._unavailable_reason}", error=True)
            return

        try:
            credentials = self.store.enumerate()
        except StoreError as e:
            logger.error(f"Failed to list credentials: {e}")
            self._set_status(f"Failed to list credentials: {e}", error=True)
            return

        for cred in credentials:
            row = self.table.rowCount()
            self.table.insertRow(row)
            self.table.setItem(row, 0, QTableWidgetItem(cred.name))
            self.table.setItem(row, 1, QTableWidgetItem(cred.username))

        self._set_status(f"{len(credentials)} credential(s) - {self.store.backend_name}")

    def _set_status(self, text: str, error: bool = False) -> None:
        self.status_label.setText(text)
        self.status_label.setProperty("error", error)
        # Re-apply the stylesheet so the error colour follows the property
        self.status_label.style().unpolish(self.status_label)
        self.status_label.style().polish(self.status_label)

    def get_selected_credential(self) -> Optional[str]:
        """Get currently selected credential name."""
        row = self.table.currentRow()
        if row >= 0 and self.table.item(row, 0):
            return self.table.item(row, 0).text()
        return None

    # -------------------------------------------------------------------------
    # Context menu
    # -------------------------------------------------------------------------

    def _show_context_menu(self, pos) -> None:
        """Show right-click context menu."""
        item = self.table.itemAt(pos)
        menu = QMenu(self)

        if item:
            name = self.table.item(item.row(), 0).text()
            menu.addAction("Edit...", lambda: self.edit_credential(name))
            menu.addAction("Copy Password", lambda: self.copy_password(name))
            menu.addSeparator()
            menu.addAction("Delete", lambda: self.delete_credential(name))
        elif self.store is not None:
            menu.addAction("New Credential...", self.add_credential)

        if menu.actions():
            menu.exec(self.table.viewport().mapToGlobal(pos))

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def add_credential(self) -> None:
        dialog = CredentialDialog(self.store, self, self.theme)
        if dialog.exec() == QDialog.DialogCode.Accepted:
            self.refresh()

    def _edit_selected(self) -> None:
        name = self.get_selected_credential()
        if name:
            self.edit_credential(name)

    def edit_credential(self, name: str) -> None:
        cred = self._lookup(name)
        if cred is None:
            return

        dialog = CredentialDialog(self.store, self, self.theme, credential=cred)
        if dialog.exec() == QDialog.DialogCode.Accepted:
            self.refresh()

    def delete_credential(self, name: str) -> None:
        reply = QMessageBox.question(
            self,
            "Confirm Delete",
            f"Delete credential '{name}'?\n\nThis cannot be undone.",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
            QMessageBox.StandardButton.No
        )

        if reply != QMessageBox.StandardButton.Yes:
            return

        try:
            self.store.delete(name)
        except StoreError as e:
            QMessageBox.critical(self, "Error", f"Failed to delete: {e}")
        self.refresh()

    def copy_password(self, name: str) -> None:
        """Put the password on the clipboard without showing it."""
        cred = self._lookup(name)
        if cred is None:
            return

        QApplication.clipboard().setText(cred.password)
        self._set_status(f"Password for '{name}' copied to clipboard")
        logger.info(f"Copied password for '{name}' to clipboard")
        self.password_copied.emit(name)

    def _lookup(self, name: str) -> Optional[Credential]:
        """Fresh read for an action; warns and refreshes if it is gone."""
        try:
            return self.store.require(name)
        except StoreError as e:
            QMessageBox.warning(self, "Error", str(e))
            self.refresh()
            return None


class CredentialManagerWindow(QMainWindow):
    """Top-level window hosting the credential list. Hides on close."""

    def __init__(
        self,
        store: Optional[CredentialStore],
        theme: ManagerTheme = None,
        unavailable_reason: str = "",
        width: int = 640,
        height: int = 420,
    ):
        super().__init__()
        self.hide_on_close = True
        self.setWindowTitle("Credential Manager")
        self.resize(width, height)

        self.manager = CredentialManagerWidget(
            store, theme=theme, unavailable_reason=unavailable_reason
        )
        self.setCentralWidget(self.manager)

    def refresh(self) -> None:
        self.manager.refresh()

    def closeEvent(self, event):
        if not self.hide_on_close:
            super().closeEvent(event)
            return
        # Keep the single window alive for the next hotkey press
        event.ignore()
        self.hide()
