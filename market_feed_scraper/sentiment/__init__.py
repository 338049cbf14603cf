"""Multi-source sentiment acquisition."""
