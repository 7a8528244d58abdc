"""Configuration: feature toggles."""
