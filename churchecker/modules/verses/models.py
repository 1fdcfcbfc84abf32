# Supabase table: daily_verses
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- verse_date: date (unique) - one verse per calendar day in the configured timezone
- verse_text: text (not null)
- verse_reference: text (not null) - e.g. '요한복음 3:16'
- source: text (not null) - 'gemini' or 'fallback'
- created_at: timestamp (default: now())
"""
