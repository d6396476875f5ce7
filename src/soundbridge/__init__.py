"""SoundBridge - Spotify login bridge with one-time session code handoff."""

__version__ = "0.1.0"
