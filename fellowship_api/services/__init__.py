# fellowship_api/services/__init__.py
"""
Service layer for the verse enrichment pipeline.

Leaf services (parser, testament classifier, text resolver, generator) have no
knowledge of HTTP; EnrichmentPipeline composes them with the datastore.
"""
