"""Update a repository from the upstream template it was created from."""

__version__ = "0.1.0"
