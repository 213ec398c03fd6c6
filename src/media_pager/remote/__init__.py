"""Remote catalog access."""
