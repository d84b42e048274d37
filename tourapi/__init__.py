"""Aggregation and normalization layer for the KorService2 tourism API."""
