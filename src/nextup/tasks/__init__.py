"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Emotion, QueryContext)
- task_store.py: in-memory map guarded by a read/write lock
- task_persistence.py: atomic JSON file + background saver thread
- ranking.py: scoring and ordering against a QueryContext
- task_api.py: small high-level helpers used by the connectors
"""
