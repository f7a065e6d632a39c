"""
View layer.

Components:
- events.py: observer bus for view changes
- list_view.py: visible entries of one list (+ empty placeholder)
- view_sync.py: gesture handling and reconciliation with storage
"""
