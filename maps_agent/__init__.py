"""Route optimization and place search tools for chat agents."""
