"""Image extraction schemas."""

from pydantic import BaseModel, Field


class ImageExtractionResult(BaseModel):
    """Content extracted from one image block.

    Only successful extractions produce a result. Failed images are dropped
    rather than kept as empty placeholders.
    """

    index: int = Field(..., ge=0, description="Position in the lesson's image list")
    block_id: str = Field(..., description="Originating image block ID")
    source_url: str = Field(..., description="URL the image was fetched from")
    caption: str = Field("", description="Caption attached to the image block")
    extracted_content: str = Field(..., description="Structured text from the image")


class CompositeArtifact(BaseModel):
    """Synthesized text for one lesson, ready for card generation."""

    lesson_identity: str = Field(..., description="Identity of the source lesson")
    text: str = Field("", description="Final merged markdown")
    converted_text: str = Field(
        "", description="Cleaned markdown of the non-image blocks"
    )
    images: list[ImageExtractionResult] = Field(
        default_factory=list, description="Successful image extractions"
    )
    images_attempted: int = Field(0, ge=0, description="Image blocks in the lesson")

    @property
    def length(self) -> int:
        return len(self.text)

    def is_substantial(self, min_chars: int) -> bool:
        """Check whether the artifact is long enough to generate cards from."""
        return self.length >= min_chars
