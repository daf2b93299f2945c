"""Domain layer: value objects, enums and exceptions. No I/O."""
