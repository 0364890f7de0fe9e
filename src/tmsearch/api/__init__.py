"""API layer: canonical state and read surface for UI and export.

Key rules:

1. SearchStore is the only owner of query, results, loading and filters
2. Renderers receive a SearchView and never filter or fetch themselves
3. Results are replaced wholesale by the latest non-stale fetch only
"""
