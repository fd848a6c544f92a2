"""
Grammar Drills Test Suite

Test Structure:
    tests/
    ├── conftest.py                  # Shared fixtures (in-memory SQLite, mock LLM)
    └── unit/
        ├── test_srs.py              # Review scheduling rules
        ├── test_content_store.py    # Topics, versions, exercises, views, stats
        ├── test_exercise_service.py # Batch delivery and cache fill
        ├── test_llm_client.py       # LiteLLM wrapper and retries
        └── test_api.py              # HTTP endpoints

Running Tests:
    # Run all tests
    pytest backend/tests/ -v

    # Run with coverage
    pytest backend/tests/ --cov=grammar_drills --cov-report=html
"""
