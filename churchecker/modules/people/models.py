# Supabase table: students (roster of students and teachers)
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- church_id: uuid (foreign key to churches.id, on delete cascade)
- name: text (not null)
- phone: text (nullable)
- age: integer (nullable)
- grade: text (nullable)
- type: text (not null, default: 'student') - values: student, teacher
- photo_url: text (nullable) - public URL in the student-photos bucket
- attendance_days: smallint[] (not null, default: '{}') - weekday indices, 0 = Sunday .. 6 = Saturday;
  empty means the person may check in any day
- registered_by: uuid (nullable)
- registered_at: timestamp (default: now())
- updated_at: timestamp (nullable)

Photos live at student-photos/<church_id>/<person_id>.<ext>.
Deleting a person deletes their attendance rows (on delete cascade) and
nulls the optional person links in offerings, prayer_requests and
service_schedules (on delete set null).
"""
