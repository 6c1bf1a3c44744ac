"""Configuration and logging helpers shared across PDFEmbed."""
