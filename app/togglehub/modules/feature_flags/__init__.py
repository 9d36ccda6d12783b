"""
Feature Flags module.

- Flags belong to an organization and carry an ordered list of revisions
- New revisions are proposed as drafts; approval makes exactly one live
- Every approval bumps the flag's version
- Deleting a flag only stamps deleted_at
"""
