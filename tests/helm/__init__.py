"""Helm chart tests for auto-deploy-app.

This package renders charts/auto-deploy-app with helm and asserts the
migration hook's templating rules:
- Parametrized render cases (test_db_migrate_hook.py)
- BDD scenarios for the same rules (features/)
- Values files used by the cases (fixtures/)

Tests skip when helm is not installed.
"""
