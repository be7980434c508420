"""
Unit tests for rebound.

Test individual components in isolation:
- Matchers, message formatting, policy and attempt state
- Orchestrator loop (budget, backoff, exception lists, callbacks, flaky detection)
- Settings, example adapter, reporters, decorator, logging
"""
