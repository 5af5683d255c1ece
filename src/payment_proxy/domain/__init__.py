"""Pure domain logic: amount normalization and request identifiers."""
