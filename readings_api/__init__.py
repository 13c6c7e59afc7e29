"""HTTP service for time-stamped metric readings with daily Power aggregation."""
