from typing import Any, Dict, List, Self, Union

from pydantic import BaseModel, Field, model_serializer


class PayloadMetadata(BaseModel):
    """Metadata for MCP payloads."""
    message  : str | None = Field(default="",   description="status message associated with the payload")
    error    : str | None = Field(default=None, description="Error message if any")
    count    : int | None = Field(default=0,    description="Total count of items if collection")

    @model_serializer
    def model_serialize(self) -> Dict[str, Any]:
        """Serialize the metadata to a dictionary, leaving out empty message and error."""
        output = {}

        if message := self.message : output["message"] = message
        if error   := self.error   : output["error"]   = error

        output["count"] = self.count or 0

        return output


class Payload(BaseModel):
    """Envelope of every tool response."""
    metadata   : PayloadMetadata       = Field(default_factory=PayloadMetadata, description="Metadata about this payload")
    record     : Dict[str, Any]        = Field(default_factory=dict, description="Single record payload")
    collection : List[Dict[str, Any]]  = Field(default_factory=list, description="Collection of records payload")

    @model_serializer
    def model_serialize(self) -> Dict[str, Union[str, Dict[str, Any], List[Dict[str, Any]]]]:
        """Serialize the payload, dropping an empty record or collection."""
        output: Dict[str, Any] = {"metadata": self.metadata.model_dump()}

        if record := self.record:
            output["record"] = record

        if collection := self.collection:
            output["collection"] = collection

        return output

    @classmethod
    def create(cls, record: Union[BaseModel, Dict[str, Any]], message: str | None = None) -> Self:
        """A single-record payload. Models are dumped in JSON mode."""
        if isinstance(record, BaseModel):
            record = record.model_dump(mode="json")
        return cls(metadata=PayloadMetadata(message=message, count=1), record=record)

    @classmethod
    def failure(cls, error: str | BaseException) -> Self:
        return cls(metadata=PayloadMetadata(error=str(error)))
