"""Service layer: content storage, LLM access and exercise delivery."""
