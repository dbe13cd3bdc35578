"""Audio output backends."""
