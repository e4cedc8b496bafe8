"""Equipment and state catalog models."""

from __future__ import annotations

from pydantic import AliasChoices, ConfigDict, Field

from fleetmap.models._base import FleetBaseModel, Identifier, Text


class Equipment(FleetBaseModel):
    """A tracked equipment unit from the inventory list."""

    model_config = ConfigDict(protected_namespaces=())

    id: Identifier = Field(validation_alias=AliasChoices("id", "equipmentId"))
    """Unique equipment identifier."""
    name: Text = Field(default="", validation_alias=AliasChoices("name"))
    """Display name."""
    model_id: Text = Field(default="", validation_alias=AliasChoices("equipmentModelId", "modelId", "model_id"))
    """Equipment model identifier."""


class StateDefinition(FleetBaseModel):
    """An operational state from the state catalog."""

    id: Identifier = Field(validation_alias=AliasChoices("id"))
    name: Text = Field(default="", validation_alias=AliasChoices("name"))
    color: Text = Field(default="", validation_alias=AliasChoices("color"))
