"""Service layer: prompt check stages and their errors."""
