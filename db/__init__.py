"""
Database utilities, migrations, and seeding.

Runtime DB access lives in the services. This package is for repo-level DB operations:
- Alembic migrations config (core eWallet DB and local ledger DB)
- Admin panel user seeder
"""
