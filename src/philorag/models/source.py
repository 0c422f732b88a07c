"""Text source data model."""

from typing import Literal

from pydantic import BaseModel, ConfigDict

SourceFormat = Literal["txt", "html", "pdf"]


class TextSource(BaseModel):
    """A catalogued primary-source work that can be fetched and indexed."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    author: str
    philosopher: str
    url: str
    format: SourceFormat = "txt"
    description: str | None = None
