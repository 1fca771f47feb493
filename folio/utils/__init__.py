"""Small, dependency-free helpers shared across Folio."""
