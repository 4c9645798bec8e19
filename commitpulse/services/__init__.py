"""Service layer — command orchestration and repository statistics."""
