"""
TrashItemAdapter - Presentation State for One TrashItem

Bridges a TrashItem to whatever draws it. Owns the two pieces of UI state:
- confirmationPending: the "are you sure?" step is showing
- controlsSensitive:   buttons may be pressed

TrashManager calls setControlsSensitive(False) before it starts a delete or
restore for the item and setControlsSensitive(True) once it has finished,
whatever the outcome. The view re-renders on the notify signals.
"""

from PySide6.QtCore import QObject, Signal, Slot, Property

from trashbin.trash_item import TrashItem


class TrashItemAdapter(QObject):
    confirmationChanged = Signal(bool)
    controlsSensitiveChanged = Signal(bool)
    # (op_type, success, message) - last outcome, for inline feedback
    outcome = Signal(str, bool, str)

    def __init__(self, item: TrashItem, parent=None):
        super().__init__(parent)
        self._item = item
        self._sensitive = True

    @property
    def item(self) -> TrashItem:
        return self._item

    @Slot()
    def toggleConfirmation(self) -> None:
        self.confirmationChanged.emit(self._item.toggle_confirmation())

    @Slot(bool)
    def setControlsSensitive(self, sensitive: bool) -> None:
        if sensitive != self._sensitive:
            self._sensitive = sensitive
            self.controlsSensitiveChanged.emit(sensitive)

    def notifyOutcome(self, op_type: str, success: bool, message: str) -> None:
        # Close the confirmation step once the user's choice has run
        if self._item.confirmation_pending:
            self.toggleConfirmation()
        self.outcome.emit(op_type, success, message)

    # -------------------------------------------------------------------------
    # PROPERTIES
    # -------------------------------------------------------------------------
    def _get_name(self) -> str:
        return self._item.name

    def _get_path(self) -> str:
        return self._item.path

    def _get_original_path(self) -> str:
        return self._item.original_path

    def _get_deletion_date(self) -> str:
        return self._item.deletion_date.isoformat(sep=" ")

    def _get_is_directory(self) -> bool:
        return self._item.is_directory

    def _get_icon_name(self) -> str:
        icon = self._item.icon
        return icon.to_string() if icon is not None else ""

    def _get_confirmation_pending(self) -> bool:
        return self._item.confirmation_pending

    def _get_controls_sensitive(self) -> bool:
        return self._sensitive

    name = Property(str, _get_name, constant=True)
    path = Property(str, _get_path, constant=True)
    originalPath = Property(str, _get_original_path, constant=True)
    deletionDate = Property(str, _get_deletion_date, constant=True)
    isDirectory = Property(bool, _get_is_directory, constant=True)
    iconName = Property(str, _get_icon_name, constant=True)
    confirmationPending = Property(bool, _get_confirmation_pending, notify=confirmationChanged)
    controlsSensitive = Property(bool, _get_controls_sensitive, setControlsSensitive, notify=controlsSensitiveChanged)
