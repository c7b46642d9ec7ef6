"""Council Chat: conversation view and transcript export for LLM council deliberations."""
