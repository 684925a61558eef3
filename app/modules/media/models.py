# Supabase table: media
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- user_id: uuid (foreign key to auth.users.id, not null) - uploader
- file_url: text (not null) - public URL (S3 or Supabase Storage)
- file_name: text (not null) - original file name
- file_type: text (not null) - one of: image, video, document
- file_size: bigint (not null) - bytes
- uploaded_at: timestamp (default: now())

Storage buckets (Supabase Storage, public): media, profiles
Object keys are "{user_id}/{epoch_ms}.{ext}".
"""
