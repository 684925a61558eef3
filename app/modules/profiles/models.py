# Supabase tables: profiles, profile_views
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

profiles:
- id: uuid (primary key)
- user_id: uuid (foreign key to auth.users.id, unique, not null)
- student_id: text (unique, not null) - human-readable id used in public URLs
- full_name: text (not null)
- bio: text (nullable)
- skills: text[] (nullable)
- social_links: jsonb (nullable) - platform -> url
- profile_pic: text (nullable) - public URL of the uploaded picture
- quote: text (nullable)
- public: boolean (default: true)
- first_login: boolean (default: true) - cleared on first password change
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

profile_views (append-only visit log):
- id: uuid (primary key)
- profile_id: uuid (foreign key to profiles.id, not null)
- visitor_id: uuid (nullable) - signed-in visitor, null for anonymous
- visited_at: timestamp (default: now())
"""
