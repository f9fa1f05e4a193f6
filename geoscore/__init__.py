"""GEO visibility scoring service - configuration, logging, errors and payload schemas."""
