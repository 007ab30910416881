"""Application layer: ports and use cases orchestrating console sessions."""
