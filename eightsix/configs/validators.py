"""YAML schema validation for generator configuration files.

Provides the pydantic schema for ``generator_config.v1`` files so that a
bad file fails fast with an actionable message (offending key, expected
range) instead of producing a silently different logo.

Ranges follow the control panel sliders:
    - dot_size: 20..80 (radius = dot_size / 1000)
    - spread: 0.5..1.2 (outer ring radius)
    - padding: 0..100 (percent border, export only)
    - text: at most 250 UTF-16 code units

The in-memory :class:`~eightsix.configs.loader.GeneratorConfig` is not
range-checked; only files are.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from eightsix.utils.text import utf16_length

SCHEMA_NAME = "generator_config.v1"
MAX_TEXT_UNITS = 250


class ConfigFileV1(BaseModel):
    """Generator configuration file (generator_config.v1 schema)."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    schema_version: str = Field(SCHEMA_NAME, alias="schema", description="Schema version")
    text: str = Field("", description="Text to encode")
    dot_size: float = Field(45, ge=20, le=80, description="Dot size (radius * 1000)")
    spread: float = Field(0.85, ge=0.5, le=1.2, description="Outer ring radius")
    padding: float = Field(20, ge=0, le=100, description="Export border (percent)")
    seed: int = Field(12345, description="PRNG seed (wrapped to 32 bits)")

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != SCHEMA_NAME:
            raise ValueError(f"Expected schema '{SCHEMA_NAME}', got '{v}'")
        return v

    @field_validator('text')
    @classmethod
    def validate_text_length(cls, v: str) -> str:
        units = utf16_length(v)
        if units > MAX_TEXT_UNITS:
            raise ValueError(
                f"Text is {units} UTF-16 code units long, maximum is {MAX_TEXT_UNITS}"
            )
        return v
