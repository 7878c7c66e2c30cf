"""quote_server — FastAPI REST API for the quote-rulesets SDK.

Exposes visible-question computation, price rule application and estimate
aggregation as stateless HTTP endpoints, plus read-only template and
reference data.  Forms, guides and answers arrive as snapshots in each
request body; nothing is persisted.
"""
