"""
Rover Pictures Test Suite

Structure:
- unit/: component tests (validation, dates, cache, upstream client, encoder, service, preload)
- integration/: FastAPI app tests with the upstream API mocked via httpx.MockTransport
"""
