"""
ember-addon-migrator test suite
===============================

Test Modules
------------
- test_models.py: Manifest and option models
- test_gatherers.py: Manifest reader, git root, scratch directories
- test_package_manager.py: Lockfile-based package manager detection
- test_imports.py: Static import analysis
- test_info.py: The AddonInfo resolution engine
- test_planner.py: Migration planning
- test_cli.py: Command-line interface

Running Tests
-------------
    # Run all tests
    pytest

    # Skip tests that need git
    pytest -m "not integration"
"""
