"""
Test suites for ui_session_tools.

  - unit/: session manager, driver factory and wait engine against fake drivers
  - ui_testing/tests/: live-browser checks, enabled with UI_LIVE_BROWSER=1

Kept importable so `run_tests.py` and IDEs can resolve `testsuites.*`.
"""
