# Supabase table: comments
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- user_id: uuid (foreign key to auth.users.id, not null) - author
- target_type: text (not null) - one of: profile, page
- target_id: uuid (not null) - profiles.id or pages.id depending on target_type
- content: text (not null)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

Authors are shown with their profiles row (full_name, profile_pic, student_id),
looked up by user_id.
"""
