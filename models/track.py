# backend/models/track.py
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List, Literal, Optional


def _unique_genres(genres: Optional[List[str]]) -> Optional[List[str]]:
    """Elimina géneros repetidos manteniendo el orden original."""
    if genres is None:
        return None
    seen = []
    for genre in genres:
        if genre not in seen:
            seen.append(genre)
    return seen


class TrackCreate(BaseModel):
    title: str = Field(..., min_length=1)
    artist: str = Field(..., min_length=1)
    album: str = ""
    genres: List[str] = Field(default_factory=list)
    coverImage: str = ""
    slug: Optional[str] = None  # se genera desde el título si no viene

    @field_validator("genres")
    @classmethod
    def dedupe_genres(cls, value):
        return _unique_genres(value)


class TrackUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    artist: Optional[str] = Field(None, min_length=1)
    album: Optional[str] = None
    genres: Optional[List[str]] = None
    coverImage: Optional[str] = None
    slug: Optional[str] = Field(None, min_length=1)

    @model_validator(mode="before")
    @classmethod
    def reject_nulls(cls, data):
        """Los campos son opcionales (omitibles) pero nunca null."""
        if isinstance(data, dict):
            nulls = [name for name, value in data.items() if value is None]
            if nulls:
                raise ValueError(f"Campos no pueden ser null: {', '.join(nulls)}")
        return data

    @field_validator("genres")
    @classmethod
    def dedupe_genres(cls, value):
        return _unique_genres(value)


class Track(BaseModel):
    id: str
    title: str
    artist: str
    album: str = ""
    genres: List[str] = Field(default_factory=list)
    coverImage: str = ""
    audioFile: str = ""
    slug: str
    createdAt: str
    updatedAt: str


class TrackQuery(BaseModel):
    """Parámetros de búsqueda/paginación de GET /tracks."""
    search: Optional[str] = None
    genre: Optional[str] = None
    artist: Optional[str] = None
    sort: str = "createdAt"
    order: Literal["asc", "desc"] = "desc"
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)


class TrackPageMeta(BaseModel):
    total: int
    page: int
    limit: int
    totalPages: int


class TrackPage(BaseModel):
    data: List[Track]
    meta: TrackPageMeta


class BatchDeleteRequest(BaseModel):
    ids: List[str]


class BatchDeleteResult(BaseModel):
    success: List[str] = Field(default_factory=list)
    failed: List[str] = Field(default_factory=list)
