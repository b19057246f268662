"""Infrastructure: concrete storage backends."""
