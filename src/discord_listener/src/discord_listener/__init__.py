"""Discord side of the workflow bridge: button interactions, text commands and process entry point."""
