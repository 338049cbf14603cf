"""Schedule document retrieval, models and extraction strategies."""
