"""Behaviour-Driven Development (BDD) features for the migration hook.

This package contains:
- Gherkin feature files (db_migrate_hook.feature)
- pytest-bdd step implementations (steps/)
"""
