# Supabase table: attendance
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- student_id: uuid (foreign key to students.id, on delete cascade)
- church_id: uuid (foreign key to churches.id, on delete cascade)
- date: date (not null) - calendar day in the church timezone, no time part
- checked_by: uuid (nullable) - user who performed the check-in
- created_at: timestamp (default: now())

Constraints:
- unique (student_id, date): at most one check-in per person per day;
  a second insert fails with Postgres error 23505
"""
