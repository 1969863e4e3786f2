"""tasksync: per-user task store synchronized with a Supabase (PostgREST) backend."""

__version__ = "0.1.0"
