# Supabase table: expenses
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- church_id: uuid (foreign key to churches.id, on delete cascade)
- category: text (not null) - snacks, materials, events, equipment, transportation, other
- item_name: text (not null)
- amount: bigint (not null, >= 0) - whole won
- expense_date: date (not null)
- receipt_url: text (nullable)
- notes: text (nullable)
- created_by: uuid (nullable)
- created_at: timestamp (default: now())
"""
