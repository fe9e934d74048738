"""Pure allocation and affordability rules (no I/O)."""
