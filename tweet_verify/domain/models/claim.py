"""Domain models for factual claims and the search queries used to check them."""

from pydantic import AliasChoices, BaseModel, Field, field_validator


class Claim(BaseModel):
    """A single factual statement extracted from a post."""

    claim_text: str = Field(
        ...,
        alias="claimText",
        validation_alias=AliasChoices("claimText", "claim_text", "claim"),
        description="The claim text to be verified",
    )
    type: str = Field(default="", description="Kind of claim (statistical, scientific, historical...)")
    specificity: str = Field(default="", description="How specific/verifiable the claim is")

    @field_validator("type", "specificity", mode="before")
    @classmethod
    def none_as_empty(cls, value):
        return "" if value is None else value

    class Config:
        """Pydantic model configuration."""
        frozen = True  # Immutable model
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "claimText": "Water boils at 100°C at sea level",
                "type": "scientific",
                "specificity": "very specific",
            }
        }


class SearchQuery(BaseModel):
    """A web search query derived from a claim."""

    query: str = Field(..., description="Search engine query text")
    rationale: str = Field(default="", description="Why this query helps verify the claim")

    @field_validator("rationale", mode="before")
    @classmethod
    def none_as_empty(cls, value):
        return "" if value is None else value

    class Config:
        """Pydantic model configuration."""
        frozen = True
