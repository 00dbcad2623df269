from __future__ import annotations

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from htmlguard.config import Config
from htmlguard.utils.html_sanitizer import enforce_input_limit, sanitize_html


def _max_input_bytes(info: ValidationInfo) -> int | None:
    # Callers may pass context={"max_input_bytes": ...} to model_validate
    context = info.context or {}
    return context.get("max_input_bytes", Config.HTMLGUARD_MAX_INPUT_BYTES)


def _clean_html(v: str | None, info: ValidationInfo) -> str | None:
    if v is None:
        return None
    return sanitize_html(enforce_input_limit(v, _max_input_bytes(info)))


class PostContentCreate(BaseModel):
    """Editor submission; content and excerpt are sanitized before storage."""

    title: str = Field(min_length=1, max_length=500)
    slug: str = Field(min_length=1, max_length=220)
    content: str = Field(min_length=1)
    excerpt: str | None = Field(default=None, max_length=1000)

    @field_validator("title")
    @classmethod
    def title_strip(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title must not be blank")
        return v

    @field_validator("slug")
    @classmethod
    def slug_lower(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("content")
    @classmethod
    def sanitize_content(cls, v: str, info: ValidationInfo) -> str:
        cleaned = _clean_html(v, info)
        if not cleaned or not cleaned.strip():
            raise ValueError("content is empty after sanitization")
        return cleaned

    @field_validator("excerpt")
    @classmethod
    def sanitize_excerpt(cls, v: str | None, info: ValidationInfo) -> str | None:
        return _clean_html(v, info)


class PostContentUpdate(BaseModel):
    """Partial update; only supplied fields are validated and sanitized."""

    title: str | None = Field(default=None, min_length=1, max_length=500)
    slug: str | None = Field(default=None, min_length=1, max_length=220)
    content: str | None = Field(default=None, min_length=1)
    excerpt: str | None = Field(default=None, max_length=1000)

    @field_validator("title")
    @classmethod
    def title_strip(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        if not v:
            raise ValueError("title must not be blank")
        return v

    @field_validator("slug")
    @classmethod
    def slug_lower(cls, v: str | None) -> str | None:
        return v.strip().lower() if v is not None else None

    @field_validator("content")
    @classmethod
    def sanitize_content(cls, v: str | None, info: ValidationInfo) -> str | None:
        if v is None:
            return None
        cleaned = _clean_html(v, info)
        if not cleaned or not cleaned.strip():
            raise ValueError("content is empty after sanitization")
        return cleaned

    @field_validator("excerpt")
    @classmethod
    def sanitize_excerpt(cls, v: str | None, info: ValidationInfo) -> str | None:
        return _clean_html(v, info)
