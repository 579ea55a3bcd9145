"""
Sendwize Compliance Engine - Shared Router Helpers

Request/response models speak the camelCase JSON of the public API;
Python code sees snake_case attributes.
"""
from fastapi import Request
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..services.publishing import ResultPublisher


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def get_publisher(request: Request) -> ResultPublisher:
    """Dependency for FastAPI - the app-wide result publisher."""
    publisher = getattr(request.app.state, "publisher", None)
    if publisher is None:
        publisher = ResultPublisher()
        request.app.state.publisher = publisher
    return publisher
