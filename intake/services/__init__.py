"""Services Layer: async shell around the core (multipart part stream, upload validator).

Invariants:
    - Services own all awaiting on request bodies; core stays synchronous

Design Decisions:
    - One module per concern: parsing the wire format vs deciding the outcome
"""
