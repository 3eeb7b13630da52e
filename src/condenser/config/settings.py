from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_FILTERED_CHARACTERS = "♩♪♫♬〜〜"
MINIMUM_MATCH_SCORE = 40


class Settings(BaseSettings):
    """
    Runtime configuration for condenser.

    All settings are loaded from environment variables with the
    `CONDENSER_` prefix and optional `.env` support.

    The same object is handed to period extraction and to batch matching,
    so both halves of a run see one consistent configuration.
    """

    model_config = SettingsConfigDict(
        env_prefix="CONDENSER_",
        env_file=".env",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Period extraction
    # ------------------------------------------------------------------
    padding_ms: int = Field(
        default=500,
        ge=0,
        description="Milliseconds of audio kept before and after each subtitle entry.",
    )
    filter_parentheses: bool = Field(
        default=True,
        description="Drop entries wholly enclosed in (), （）, [] or {} (sound cues, speaker notes).",
    )
    filtered_characters: str = Field(
        default=DEFAULT_FILTERED_CHARACTERS,
        description="Characters removed from entry text before the emptiness check.",
    )

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------
    subtitle_suffix: str = Field(
        default="",
        description="Suffix between the video stem and the subtitle extension (e.g. '.ja').",
    )
    minimum_match_score: int = Field(
        default=MINIMUM_MATCH_SCORE,
        ge=0,
        le=100,
        description="Lowest heuristic score accepted as a video/subtitle match.",
    )

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------
    output_format: Literal["mp3", "wav", "flac", "aac"] = Field(
        default="mp3",
        description="Container/codec of the condensed audio.",
    )
    output_condensed_subtitles: bool = Field(
        default=False,
        description="Also write subtitles re-timed onto the condensed audio.",
    )
    condensed_subtitles_format: Literal["srt", "lrc"] = Field(
        default="srt",
        description="Format of the condensed subtitles.",
    )
    output_dir: str | None = Field(
        default=None,
        description="Directory for outputs. Defaults to the directory of each video.",
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR).",
    )

    def to_public_dict(self) -> dict:
        """Return a dictionary of settings suitable for logging or CLI display."""
        return {
            "padding_ms": self.padding_ms,
            "filter_parentheses": self.filter_parentheses,
            "filtered_characters": self.filtered_characters,
            "subtitle_suffix": self.subtitle_suffix,
            "minimum_match_score": self.minimum_match_score,
            "output_format": self.output_format,
            "output_condensed_subtitles": self.output_condensed_subtitles,
            "condensed_subtitles_format": self.condensed_subtitles_format,
            "output_dir": self.output_dir,
            "log_level": self.log_level,
        }
