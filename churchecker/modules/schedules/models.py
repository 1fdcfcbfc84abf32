# Supabase table: service_schedules
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- church_id: uuid (foreign key to churches.id, on delete cascade)
- service_type: text (not null) - worship, prayer, word, accompanist, media, other
- service_name: text (not null) - e.g. '찬양 인도'
- assigned_student_id: uuid (nullable, foreign key to students.id, on delete set null)
- schedule_date: date (not null)
- status: text (default: 'scheduled') - scheduled, completed, cancelled
- notes: text (nullable)
- created_by: uuid (nullable)
- created_at: timestamp (default: now())
"""
