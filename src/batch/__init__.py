"""Input selection: proposal store and selection policies."""
