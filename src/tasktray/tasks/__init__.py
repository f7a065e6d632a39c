"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskList, Transition)
- task_store.py: whole-list persistence over the key-value store
- lifecycle.py: legal transitions, id generation, lifecycle errors
"""
