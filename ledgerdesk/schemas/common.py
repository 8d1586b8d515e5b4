"""Shared schema base and pagination envelopes."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """camelCase on the wire, snake_case in Python; ORM objects validate directly."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class PageMeta(ApiModel):
    limit: int
    offset: int


class DocumentPageMeta(PageMeta):
    total: int
