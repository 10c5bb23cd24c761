"""Core unpack pipeline: verify, extract, scan, select, fetch, classify, orchestrate."""
