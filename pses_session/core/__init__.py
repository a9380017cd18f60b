"""Process setup shared by entry points."""
