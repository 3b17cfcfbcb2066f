"""Service layer - storage backends, file handles and URL signing."""
