"""
Use Cases

Organized by area:
- auth/: Authentication flows and session authorization
- account/: Self-service identity changes
- admin/: Administrative actions
- audit/: Audit logs
"""
