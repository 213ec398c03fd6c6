"""Domain models and raw-item mapping."""
