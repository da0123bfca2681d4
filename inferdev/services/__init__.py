"""Business logic: question filtering, scoring, survey orchestration and sessions."""
