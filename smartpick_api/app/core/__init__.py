"""Configuration, logging, persistence and security plumbing."""
