"""Report building: markup extraction, classification, aggregation and outputs."""
