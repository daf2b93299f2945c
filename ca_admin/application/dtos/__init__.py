"""Application DTOs (no dependency on the store backend)."""
