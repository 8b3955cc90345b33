"""Output layer: DSF2Text formatting, writers and exclusion regions."""
