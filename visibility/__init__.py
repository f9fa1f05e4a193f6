"""GEO visibility scoring - judge aggregation, competitor detection and share of voice."""
