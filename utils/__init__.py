"""Small shared helpers: ticker cleaning and CSV I/O."""
