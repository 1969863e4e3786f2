"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Subtask, TaskList, Priority, ...)
- task_gateway.py: PostgREST gateway over httpx + row mapping
- task_store.py: client-side task state synchronized through the gateway
- task_api.py: small high-level helpers used by the console commands
"""
