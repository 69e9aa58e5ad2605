"""
Base Request Model
Shared behaviour for schemaless documents validated at the boundary
"""
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict


class DocumentIn(BaseModel):
    """Request body that keeps caller-supplied extra fields"""

    model_config = ConfigDict(extra="allow")

    def to_document(self) -> Dict[str, Any]:
        """Plain dict ready for insertion; ids are always server generated"""
        doc = self.model_dump(exclude_none=True)
        doc.pop("_id", None)
        return doc
