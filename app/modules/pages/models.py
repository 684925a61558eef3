# Supabase table: pages
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- user_id: uuid (foreign key to auth.users.id, not null) - owner
- title: text (not null)
- content: text (default: '') - markdown source, rendered by the frontend
- published: boolean (default: false) - only published pages are public
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())
"""
