"""Memory artifact builder: unit ordering, packaging and emission."""
