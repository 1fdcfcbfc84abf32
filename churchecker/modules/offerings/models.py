# Supabase table: offerings
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- church_id: uuid (foreign key to churches.id, on delete cascade)
- student_id: uuid (nullable, foreign key to students.id, on delete set null)
- offering_type: text (not null) - tithe, thanksgiving, mission, building, special, other
- amount: bigint (not null, >= 0) - whole won
- offering_date: date (not null)
- notes: text (nullable)
- created_by: uuid (nullable)
- created_at: timestamp (default: now())
"""
