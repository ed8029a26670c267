"""
Schemas module - request/response schemas for API endpoints.

Request schemas double as the validation gate's rules: each one forbids
unknown fields and carries its own per-field `messages`.
"""
