# Supabase Auth
# This module uses Supabase's built-in authentication system
# No custom tables are required - Supabase Auth handles:
# - User registration (auth.users table)
# - Password sign-in and session management
# - JWT token generation and validation
# - Password hashing and security

"""
Supabase Auth provides:
- auth.sign_up() - Register new students (a profiles row is created right after)
- auth.sign_in_with_password() - Authenticate students, and re-check the
  current password before a password change
- auth.get_user() - Get current user from JWT token
- auth.sign_out() - Logout users
- auth.admin.update_user_by_id() - Set a new password (service role key)

Student identity (student_id, full_name) lives in the profiles table, not in
auth.users. The full name is also copied into user_metadata at sign-up.
"""
