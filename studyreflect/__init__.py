"""Student study companion API: media transcription and AI study artifacts."""
