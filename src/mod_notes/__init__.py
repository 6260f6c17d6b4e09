"""mod-notes: note storage API with full-text and vector search."""
