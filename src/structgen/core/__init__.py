"""Core data model: schema descriptors, request/response types and errors."""
