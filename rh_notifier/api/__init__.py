"""HTTP surface: on-demand checks, contact updates and notification routes."""
