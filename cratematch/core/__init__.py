"""Configuration, data model and collaborator protocols."""
