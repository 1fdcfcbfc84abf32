# Supabase tables: announcements, announcement_comments
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

announcements:
- id: uuid (primary key)
- church_id: uuid (foreign key to churches.id, on delete cascade)
- title: text (not null)
- content: text (not null)
- author_id: uuid (nullable)
- author_name: text (nullable) - display name captured when the post was written
- is_pinned: boolean (default: false)
- is_important: boolean (default: false)
- image_url: text (nullable) - public URL in the announcement-images bucket
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

announcement_comments:
- id: uuid (primary key)
- announcement_id: uuid (foreign key to announcements.id, on delete cascade)
- church_id: uuid (foreign key to churches.id, on delete cascade)
- content: text (not null)
- created_by: uuid (nullable)
- author_name: text (nullable)
- author_role_label: text (nullable) - 관리자 / 교사 / 멤버 at the time of writing
- created_at: timestamp (default: now())
"""
