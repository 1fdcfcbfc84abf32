# Supabase tables: prayer_requests, prayer_comments
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

prayer_requests:
- id: uuid (primary key)
- church_id: uuid (foreign key to churches.id, on delete cascade)
- student_id: uuid (nullable, foreign key to students.id, on delete set null)
- title: text (not null)
- content: text (not null)
- is_anonymous: boolean (default: false)
- is_answered: boolean (default: false)
- answer_testimony: text (nullable)
- answered_at: timestamp (nullable)
- category: text (default: '일반') - 일반, 개인, 가족, 건강, 학업, 진로, 관계, 기타
- status: text (default: '진행중') - 진행중, 응답됨, 대기중
- created_by: uuid (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

prayer_comments:
- id: uuid (primary key)
- prayer_id: uuid (foreign key to prayer_requests.id, on delete cascade)
- content: text (not null)
- created_by: uuid (nullable)
- created_by_name: text (nullable)
- created_at: timestamp (default: now())
"""
