# Supabase tables: churches, church_members, member_role_history
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

churches:
- id: uuid (primary key)
- name: text (not null)
- description: text (nullable)
- owner_id: uuid (foreign key to auth.users.id, not null) - owner is implicitly admin
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

church_members:
- id: uuid (primary key)
- church_id: uuid (foreign key to churches.id, on delete cascade)
- user_id: uuid (foreign key to auth.users.id, not null)
- role: text (not null, default: 'member') - values: admin, teacher, member
- joined_at: timestamp (default: now())
- unique constraint on (church_id, user_id)

member_role_history:
- id: uuid (primary key)
- church_id: uuid (foreign key to churches.id, on delete cascade)
- member_id: uuid (foreign key to church_members.id, on delete cascade)
- user_id: uuid (not null) - the member whose role changed
- old_role: text (not null)
- new_role: text (not null)
- changed_by: uuid (not null)
- changed_at: timestamp (default: now())

Function create_church_with_owner(p_name, p_description, p_owner_id) returns churches:
inserts the church and the owner's admin membership in one transaction.
"""
