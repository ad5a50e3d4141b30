from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict


class Category(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    trip_id: Optional[str] = None
    kind: Literal["income", "outcome"] = "outcome"
    name: str
    icon: Optional[str] = None
    color: Optional[str] = None
