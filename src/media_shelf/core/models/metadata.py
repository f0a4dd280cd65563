"""Metadata provider data models."""

from typing import List, Optional

from pydantic import BaseModel, Field

from .media import MediaKind


class TitleCandidate(BaseModel):
    """A search hit returned by the metadata provider."""

    tmdb_id: str = Field(..., description="TMDb id")
    kind: MediaKind = Field(..., description="Film or TV")
    title: str = Field(..., description="Title or series name")
    year: Optional[int] = Field(None, description="Release or first-air year")
    overview: Optional[str] = Field(None, description="Short overview")
    poster_path: Optional[str] = Field(None, description="Remote poster path")
    popularity: Optional[float] = Field(None, description="TMDb popularity score")


class FetchedMetadata(BaseModel):
    """Full metadata bundle fetched for one TMDb id."""

    tmdb_id: str = Field(..., description="TMDb id")
    title: Optional[str] = Field(None, description="Official title")
    year: Optional[int] = Field(None, description="Release or first-air year")
    description: Optional[str] = Field(None, description="Plot description")
    genres: List[str] = Field(default_factory=list, description="Genre names")
    poster: Optional[bytes] = Field(None, description="Poster image bytes")
