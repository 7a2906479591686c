"""
User Resource Module

Layout:
- domain: entity and error types
- repositories: data access
- services: validation, patching, mapping and the resource handler
- api: REST endpoints, wire shapes, formatters and links
"""
