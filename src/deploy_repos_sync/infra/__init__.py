"""Infrastructure helpers: terminal logging and filesystem paths."""
