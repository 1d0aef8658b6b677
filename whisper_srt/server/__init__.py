"""HTTP layer for the Whisper SRT converter (FastAPI)."""
