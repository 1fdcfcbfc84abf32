# Supabase table: church_events
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- church_id: uuid (foreign key to churches.id, on delete cascade)
- title: text (not null)
- description: text (nullable)
- event_type: text (not null, default: 'service') - service, meeting, retreat, special, other
- start_datetime: timestamp (not null)
- end_datetime: timestamp (nullable) - check: end_datetime >= start_datetime
- location: text (nullable)
- created_by: uuid (nullable)
- created_at: timestamp (default: now())
"""
