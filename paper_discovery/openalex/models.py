"""Pydantic models for OpenAlex /works responses."""

from pydantic import BaseModel, Field


class AuthorRef(BaseModel):
    """Dehydrated author inside an authorship."""

    id: str | None = None
    display_name: str | None = None


class Authorship(BaseModel):
    """One author position on a work."""

    author: AuthorRef | None = None
    author_position: str | None = None


class SourceRef(BaseModel):
    """Journal, conference or repository hosting a work."""

    id: str | None = None
    display_name: str | None = None


class Location(BaseModel):
    """Where a work is hosted."""

    source: SourceRef | None = None
    landing_page_url: str | None = None
    pdf_url: str | None = None


class OpenAccess(BaseModel):
    """Open access status of a work."""

    is_oa: bool | None = None
    oa_url: str | None = None


class Work(BaseModel):
    """A single scholarly work."""

    id: str
    doi: str | None = None
    title: str | None = None
    display_name: str | None = None
    publication_year: int | None = None
    authorships: list[Authorship] = Field(default_factory=list)
    primary_location: Location | None = None
    open_access: OpenAccess | None = None
    # word -> token positions
    abstract_inverted_index: dict[str, list[int]] | None = None
    cited_by_count: int | None = None


class ResponseMeta(BaseModel):
    """Paging metadata."""

    count: int | None = None
    page: int | None = None
    per_page: int | None = None


class WorksResponse(BaseModel):
    """Response from the /works endpoint."""

    meta: ResponseMeta | None = None
    results: list[Work] = Field(default_factory=list)
