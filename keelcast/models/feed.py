"""Feed-level data models: raw documents, validated items and metadata."""

from typing import Annotated, Any

from pydantic import AfterValidator, AliasChoices, BaseModel, ConfigDict, Field, model_validator

from keelcast.utils.urls import is_absolute_url

# Semi-structured parse result. Keys follow the rss-parser naming used by the
# web client (``pubDate``, ``contentSnippet``, ``itunes:duration``, ...).
RawFeedDocument = dict[str, Any]


def _check_absolute_url(value: str) -> str:
    if not is_absolute_url(value):
        raise ValueError("must be a valid absolute URL")
    return value


AbsoluteUrl = Annotated[str, AfterValidator(_check_absolute_url)]


class ValidatedItem(BaseModel):
    """One feed entry that passed structural validation."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    title: str = Field(min_length=1, description="Episode title")
    link: AbsoluteUrl = Field(description="Episode page URL")
    content: str | None = Field(default=None, description="Episode content (may contain HTML)")
    content_snippet: str | None = Field(
        default=None,
        validation_alias=AliasChoices("contentSnippet", "content_snippet"),
        description="Plain-text episode summary",
    )
    pub_date: str | None = Field(
        default=None, validation_alias=AliasChoices("pubDate", "pub_date")
    )
    duration: str | int | float | None = Field(default=None)
    itunes_duration: str | int | float | None = Field(
        default=None,
        validation_alias=AliasChoices("itunes:duration", "itunesDuration", "itunes_duration"),
    )
    # Enclosure-like payloads stay unconstrained here; see models.enclosures
    enclosure: Any = Field(default=None, validation_alias=AliasChoices("enclosure", "enclosures"))
    media_content: Any = Field(
        default=None, validation_alias=AliasChoices("media:content", "mediaContent", "media_content")
    )
    media_group: Any = Field(
        default=None, validation_alias=AliasChoices("media:group", "mediaGroup", "media_group")
    )

    @model_validator(mode="after")
    def _require_description_and_payload(self) -> "ValidatedItem":
        if not (self.content_snippet or self.content):
            raise ValueError("Episode must have either contentSnippet or content")

        if self.enclosure is None and self.media_content is None and self.media_group is None:
            raise ValueError("Episode must have an enclosure (audio file)")

        return self


class FeedMetadata(BaseModel):
    """Podcast-level display metadata extracted from a feed."""

    title: str | None = Field(default=None, description="Podcast title")
    description: str | None = Field(default=None, description="Podcast description")
    link: str | None = Field(default=None, description="Podcast website")
    author: str | None = Field(default=None, description="Podcast author")
    categories: list[str] = Field(default_factory=list, description="Categories in feed order")
    image_url: AbsoluteUrl | None = Field(default=None, description="Best-guess artwork URL")
