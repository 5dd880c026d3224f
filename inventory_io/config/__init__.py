"""Configuration loading (config/inventory.yml)."""
