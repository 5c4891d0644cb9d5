"""HTTP surface for cdscards (FastAPI)."""
