"""Base model configuration for all data structures."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Base model with standard configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class MutableModel(BaseModel):
    """Base model for records updated in place while a fetch completes."""

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)
