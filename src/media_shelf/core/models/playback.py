"""Playback command models."""

from pydantic import BaseModel, Field


class PlaybackCommands(BaseModel):
    """Shell commands that play one disk."""

    vlc: str = Field(..., description="VLC invocation")
    mpv: str = Field(..., description="MPV invocation")
