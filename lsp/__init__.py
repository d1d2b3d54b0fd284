"""Language server exposing Go outlines as document symbols."""
