"""Configuration loading and schema validation."""
