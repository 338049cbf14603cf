"""Record validation and classification."""
