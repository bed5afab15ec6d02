"""The Item record and its synthetic generator."""

import uuid
from typing import Any, Dict, Mapping

from faker import Faker
from pydantic import BaseModel, ConfigDict, Field

_faker = Faker()


class Item(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    name: str
    description: str

    def to_document(self) -> Dict[str, Any]:
        """Mongo representation, keyed by ``_id`` (stored as binary UUID)."""
        return {"_id": self.id, "name": self.name, "description": self.description}

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "Item":
        return cls(id=doc["_id"], name=doc["name"], description=doc["description"])

    def to_source(self) -> Dict[str, Any]:
        """Search index ``_source`` body."""
        return {"id": str(self.id), "name": self.name, "description": self.description}


def generate_item() -> Item:
    return Item(name=_faker.country(), description=_faker.paragraph())
