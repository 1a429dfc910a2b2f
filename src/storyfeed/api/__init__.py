"""HTTP API for the story feed."""
