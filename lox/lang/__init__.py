"""Language wrapper around the core pipeline: error reporting, sessions and the interactive shell."""
