"""
SystemSetting model for pricing configuration.
"""

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from evershine.models.base import Base


class SystemSetting(Base):
    """
    Key-value store for system settings.

    Settings are stored as JSON values to support complex types.
    Default settings are created on application startup.

    Keys:
    - default_commission_rate: Agent rate (%) used when no agent applies
    - standard_commission_rate: When set, replaces every agent's own rate
    - prices_updated_at: ISO timestamp of the last pricing input change
    """

    __tablename__ = "system_settings"

    key: Mapped[str] = mapped_column(
        String(100),
        primary_key=True,
    )
    value: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        comment="JSON value - use {'v': ...} wrapper for simple values",
    )

    def __repr__(self) -> str:
        return f"<SystemSetting(key='{self.key}')>"

    def get_value(self):
        """Get the actual value from the JSON wrapper."""
        if isinstance(self.value, dict) and "v" in self.value:
            return self.value["v"]
        return self.value

    def set_value(self, val):
        """Set value with JSON wrapper."""
        self.value = {"v": val}
