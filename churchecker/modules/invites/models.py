# Supabase table: church_invite_tokens
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- church_id: uuid (foreign key to churches.id, on delete cascade)
- token: text (not null, unique)
- role: text (not null, default: 'member') - role granted on redemption
- created_by: uuid (not null)
- expires_at: timestamp (not null)
- max_uses: integer (not null, default: 1, check > 0)
- used_count: integer (not null, default: 0, check 0 <= used_count <= max_uses)
- created_at: timestamp (default: now())

Redemption claims a use with a compare-and-set update
(UPDATE ... SET used_count = n + 1 WHERE id = ? AND used_count = n),
so concurrent redeemers cannot push used_count past max_uses.
"""
