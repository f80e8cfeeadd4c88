"""Review scheduling core for the phrase study app."""
