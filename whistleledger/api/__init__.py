"""HTTP binding for the whistleblower, investigator and management portals."""
