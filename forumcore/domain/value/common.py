"""Immutable base for value objects such as ``Subject`` and ``Actor``."""

from pydantic import BaseModel, ConfigDict


class ValueObject(BaseModel):
    # Frozen models hash by value, so subjects can key dicts and locks
    model_config = ConfigDict(frozen=True)
