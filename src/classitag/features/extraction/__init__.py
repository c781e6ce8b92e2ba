"""Album metadata extraction feature."""
