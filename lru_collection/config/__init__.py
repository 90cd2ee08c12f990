"""Configuration models for keyed collections."""
