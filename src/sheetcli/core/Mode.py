# sheetcli/core/Mode.py
import enum


class Mode(enum.Enum):
    """Which view receives key presses; the value is the status bar tag."""

    NORMAL = "VIEW"
    EDIT = "EDIT"
    PALETTE = "CMDP"
    DEBUG = "DBUG"
