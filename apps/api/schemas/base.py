"""Base schemas with common fields used across all resources."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Base for all response schemas.

    from_attributes=True lets a schema be built straight from a SQLAlchemy
    object: DeploymentResponse.model_validate(deployment)
    """

    model_config = ConfigDict(from_attributes=True)


class BaseResponse(BaseSchema):
    """Base response with common fields that every resource has."""

    id: uuid.UUID
    created_at: datetime
    updated_at: datetime
