"""
bui-weex test suite
===================

Test Modules
------------
- test_models.py: Tests for the Pydantic release and settings models
- test_cache.py: Tests for the release cache store
- test_github.py: Tests for the GitHub releases client
- test_fetcher.py: Tests for archive download and extraction
- test_resolver.py: Tests for release resolution
- test_generator.py: Tests for project creation and listing
- test_cli.py: Tests for the command-line interface

Running Tests
-------------
    # Run all tests
    pytest

    # Run specific module
    pytest tests/test_resolver.py

    # Run specific test class
    pytest tests/test_resolver.py::TestPinnedVersion
"""
