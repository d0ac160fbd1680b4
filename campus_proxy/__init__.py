"""
Caching proxy between the department website and its Supabase project.

The browser never sees the Supabase credentials: it talks to this FastAPI
service, which forwards CRUD calls for a handful of tables and keeps a
short-lived read cache per table.
"""
