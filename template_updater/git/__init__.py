"""Git history access, reconciliation and remote handling."""
