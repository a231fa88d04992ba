"""Core domain layer: entities, interfaces and ledger services."""
