# Supabase Auth + table: external_identities
# Users are Supabase auth users; social accounts are linked to them here.
# Actual operations are handled via Supabase SDK in service.py

"""
Supabase Auth provides:
- auth.get_user(jwt) - Get current user from JWT token
- auth.admin.create_user() - Create a confirmed, password-less user (service role)
- auth.admin.generate_link(type="magiclink") - One-time token hash for a user
- auth.verify_otp(token_hash=...) - Exchange that hash for a session
- auth.sign_out() - Logout users

external_identities:
- id: uuid (primary key)
- provider: text (not null) - e.g. 'kakao'
- external_id: text (not null) - provider's user id
- user_id: uuid (foreign key to auth.users.id, not null, on delete cascade)
- email: text (not null) - address slot of the linked auth user
- created_at: timestamp (default: now())
- unique constraint on (provider, external_id)

No password is ever derived from the provider id: the session comes from a
server-side magic link that only the service role can generate.
"""
