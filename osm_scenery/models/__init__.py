"""Data models: features, classification results, inventory, airfields, summaries."""
