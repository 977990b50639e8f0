"""Configuration, enums, exceptions and shared constants."""
