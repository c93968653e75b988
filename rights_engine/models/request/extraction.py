"""Request models for the extraction API."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from rights_engine.models.documents import Document


class ExtractionRequest(BaseModel):
    """Documents of one policy set to extract benefits from."""

    documents: List[Document] = Field(
        default_factory=list,
        description="Extracted documents of the run (policy, schedule, endorsements, ...)",
    )
    run_id: str = Field(default="", description="Optional caller-supplied run identifier")

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
