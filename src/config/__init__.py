"""Server configuration reading and writing."""
