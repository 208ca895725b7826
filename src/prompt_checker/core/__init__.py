"""Configuration, logging and vocabulary loading."""
