"""Pure domain rules: inventory arithmetic and the donation lifecycle."""
