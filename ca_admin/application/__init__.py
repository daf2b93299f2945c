"""Application layer: DTOs and ports."""
