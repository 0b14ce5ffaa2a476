"""Application bootstrap wiring."""
