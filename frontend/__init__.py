"""Source acquisition, Go parsing, and outline serialization."""
