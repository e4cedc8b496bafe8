"""Selected-equipment view state.

The selection is an immutable value owned by the caller and passed into
the presentation layer.  It only changes through :meth:`Selection.select`
and :meth:`Selection.clear`, which return new values.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator


class Selection(BaseModel):
    """At most one selected equipment id."""

    model_config = ConfigDict(frozen=True)

    equipment_id: str | None = None

    @field_validator("equipment_id")
    @classmethod
    def _normalize_id(cls, value: str | None) -> str | None:
        if value is None:
            return None
        equipment_id = value.strip()
        if not equipment_id:
            raise ValueError("equipment_id must be non-empty")
        return equipment_id

    @classmethod
    def none(cls) -> Selection:
        return cls()

    @property
    def is_active(self) -> bool:
        return self.equipment_id is not None

    def select(self, equipment_id: str) -> Selection:
        """Return a selection holding *equipment_id*, replacing any previous one."""
        return Selection(equipment_id=equipment_id)

    def clear(self) -> Selection:
        """Return an empty selection."""
        return Selection()
