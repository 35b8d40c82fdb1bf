"""Classification and application of upstream updates."""
