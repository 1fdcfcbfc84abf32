# Supabase table: profiles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key, foreign key to auth.users.id, on delete cascade)
- name: text (not null)
- phone: text (nullable)
- bio: text (nullable)
- avatar_url: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
"""
