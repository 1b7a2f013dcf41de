"""proposalgen: batch HTML generation for proposal records."""
