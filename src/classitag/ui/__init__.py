"""User interfaces for classitag."""
