"""Concurrent MongoDB + Elasticsearch write/read demo service.

Run with:
    uvicorn usefulwork.main:app
or:
    python -m usefulwork
"""
