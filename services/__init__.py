"""Query interpretation, aggregation and response formatting."""
