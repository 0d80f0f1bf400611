"""Pydantic models for Semantic Scholar API responses."""

from pydantic import BaseModel, Field


class Author(BaseModel):
    """Author information."""

    author_id: str | None = Field(None, alias="authorId")
    name: str | None = None


class OpenAccessPdf(BaseModel):
    """Open access PDF information."""

    url: str | None = None
    status: str | None = None


class PaperSearchResult(BaseModel):
    """Paper metadata returned from the search endpoint."""

    paper_id: str = Field(..., alias="paperId")
    title: str | None = None
    abstract: str | None = None
    authors: list[Author] = Field(default_factory=list)
    year: int | None = None
    venue: str | None = None
    open_access_pdf: OpenAccessPdf | None = Field(None, alias="openAccessPdf")
    external_ids: dict[str, str | int | None] | None = Field(None, alias="externalIds")
    reference_count: int | None = Field(None, alias="referenceCount")
    publication_types: list[str] | None = Field(None, alias="publicationTypes")
    publication_date: str | None = Field(None, alias="publicationDate")

    model_config = {"populate_by_name": True}

    @property
    def pdf_url(self) -> str | None:
        if self.open_access_pdf and self.open_access_pdf.url:
            return self.open_access_pdf.url
        return None

    @property
    def doi(self) -> str | None:
        if self.external_ids and self.external_ids.get("DOI"):
            return str(self.external_ids["DOI"])
        return None


class SearchResponse(BaseModel):
    """Response from the paper search endpoint."""

    total: int = 0
    offset: int = 0
    next: int | None = None
    data: list[PaperSearchResult] = Field(default_factory=list)
